"""Shared fixtures: on-disk solution trees and generated MSBuild projects."""

from __future__ import annotations

import os
import shutil
import uuid

import pytest

FIXTURES_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "fixtures"))

_PROJECT_TEMPLATE = """<?xml version="1.0" encoding="utf-8"?>
<Project ToolsVersion="15.0" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">
  <PropertyGroup>
{guid}  </PropertyGroup>
  <ItemGroup>
{references}  </ItemGroup>
  <ItemGroup Condition=" '$(Configuration)' == 'Debug' ">
{conditional}  </ItemGroup>
  <ItemGroup>
{runtime}  </ItemGroup>
</Project>
"""


def write_project(
    root,
    relative_path: str,
    guid: str | None = None,
    references=(),
    conditional_references=(),
    runtime_references=(),
) -> str:
    """Write a minimal legacy MSBuild project and return its absolute path.

    References are Include values written as-is, so callers use backslashes
    the way Visual Studio does.
    """
    path = os.path.join(str(root), *relative_path.split("/"))
    os.makedirs(os.path.dirname(path), exist_ok=True)

    def items(tag: str, includes) -> str:
        return "".join(f'    <{tag} Include="{include}" />\n' for include in includes)

    content = _PROJECT_TEMPLATE.format(
        guid=f"    <ProjectGuid>{guid}</ProjectGuid>\n" if guid else "",
        references=items("ProjectReference", references),
        conditional=items("ProjectReference", conditional_references),
        runtime=items("RuntimeReference", runtime_references),
    )
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path


def new_guid() -> str:
    return "{" + str(uuid.uuid4()).upper() + "}"


@pytest.fixture
def fixture_copy(tmp_path):
    """Copy a directory from tests/fixtures into tmp_path and return the copy."""
    def _copy(name: str) -> str:
        destination = tmp_path / name
        shutil.copytree(os.path.join(FIXTURES_DIR, name), destination)
        return str(destination)
    return _copy


@pytest.fixture
def fixed_folder_guid(monkeypatch):
    """Make the generated Dependencies folder GUID deterministic."""
    guid = "{DA34CE5D-031A-4C97-8DE8-A81F98C0288A}"
    monkeypatch.setattr("slnsync.dotnet.solution.new_folder_guid", lambda: guid)
    return guid
