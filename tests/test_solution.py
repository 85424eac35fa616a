"""Tests for the solution document model."""

from __future__ import annotations

import os

import pytest

from slnsync.dotnet.solution import (
    dominant_newline,
    parse_solution,
    read_solution,
    split_lines,
    try_get_dependencies_folder_guid,
    write_solution,
)
from slnsync.errors import AmbiguousDependenciesFolderError, MissingFileError

from conftest import FIXTURES_DIR

SIMPLE_DIR = os.path.join(FIXTURES_DIR, "SimpleDependency")
CONDITIONAL_DIR = os.path.join(FIXTURES_DIR, "ConditionalReferenceFiltering")

FOLDER_TYPE = "{2150E333-8FDC-42A3-9474-1A3956D46DE8}"
CSHARP_TYPE = "{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}"


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        return f.read()


def _solution_lines(*projects: tuple[str, str, str, str]) -> list[str]:
    lines = ["Microsoft Visual Studio Solution File, Format Version 12.00"]
    for type_guid, name, path, guid in projects:
        lines.append(f'Project("{type_guid}") = "{name}", "{path}", "{guid}"')
        lines.append("EndProject")
    lines += ["Global", "EndGlobal"]
    return lines


class TestParseSolution:
    def test_projects_from_all_projects(self):
        document = read_solution(os.path.join(SIMPLE_DIR, "AllProjects.sln"))
        assert document.project_paths() == [
            os.path.join(SIMPLE_DIR, "A", "A.csproj"),
            os.path.join(SIMPLE_DIR, "B", "B.csproj"),
            os.path.join(SIMPLE_DIR, "C", "C.csproj"),
        ]

    def test_projects_from_unpopulated(self):
        document = read_solution(os.path.join(SIMPLE_DIR, "FromPerspective_A_Unpopulated.sln"))
        assert document.project_paths() == [os.path.join(SIMPLE_DIR, "A", "A.csproj")]

    def test_folders_are_not_projects(self):
        document = read_solution(os.path.join(CONDITIONAL_DIR, "FromPerspective_Primary_Unpopulated.sln"))
        assert [f.name for f in document.folders()] == ["Source"]
        assert [os.path.basename(p) for p in document.project_paths()] == ["Primary.csproj"]

    def test_configurations(self):
        document = read_solution(os.path.join(SIMPLE_DIR, "AllProjects.sln"))
        assert document.configurations == ["Debug|Any CPU", "Release|Any CPU"]

    def test_contains_project_ignores_case(self):
        document = read_solution(os.path.join(SIMPLE_DIR, "AllProjects.sln"))
        assert document.contains_project(os.path.join(SIMPLE_DIR, "a", "A.CSPROJ"))
        assert not document.contains_project(os.path.join(SIMPLE_DIR, "D", "D.csproj"))

    def test_lowercase_folder_type_guid(self, tmp_path):
        lines = _solution_lines((FOLDER_TYPE.lower(), "Dependencies", "Dependencies", "{11111111-1111-1111-1111-111111111111}"))
        document = parse_solution(lines, str(tmp_path / "x.sln"))
        assert document.project_paths() == []
        assert len(document.folders()) == 1

    def test_no_configurations_section(self, tmp_path):
        document = parse_solution(_solution_lines(), str(tmp_path / "x.sln"))
        assert document.configurations == []

    def test_missing_solution(self, tmp_path):
        with pytest.raises(MissingFileError):
            read_solution(str(tmp_path / "missing.sln"))


class TestRoundTrip:
    def test_split_lines_crlf(self):
        assert split_lines("a\r\nb\r\n") == (["a", "b"], ["\r\n", "\r\n"])

    def test_split_lines_without_trailing_terminator(self):
        assert split_lines("a\nb") == (["a", "b"], ["\n", ""])

    def test_split_lines_stray_lf_inside_crlf_file(self):
        assert split_lines("a\nb\r\nc\r\n") == (["a", "b", "c"], ["\n", "\r\n", "\r\n"])

    def test_split_lines_stray_crlf_inside_lf_file(self):
        assert split_lines("a\nb\r\nc\nd\n") == (["a", "b", "c", "d"], ["\n", "\r\n", "\n", "\n"])

    def test_split_lines_lone_cr(self):
        assert split_lines("a\rb\n") == (["a", "b"], ["\r", "\n"])

    def test_split_lines_empty(self):
        assert split_lines("") == ([], [])

    def test_dominant_newline(self):
        assert dominant_newline(["\n", "\r\n", "\n", ""]) == "\n"
        assert dominant_newline(["\r\n", "\r\n", "\n"]) == "\r\n"
        assert dominant_newline([""]) == "\r\n"

    def test_lf_file_with_stray_crlf_is_fully_parsed(self, tmp_path):
        content = _read_text(os.path.join(SIMPLE_DIR, "AllProjects.sln")).replace("\r\n", "\n")
        content = content.replace("Format Version 12.00\n", "Format Version 12.00\r\n", 1)
        path = tmp_path / "Mixed.sln"
        path.write_text(content, encoding="utf-8-sig", newline="")

        document = read_solution(str(path))
        assert len(document.project_paths()) == 3
        assert document.configurations == ["Debug|Any CPU", "Release|Any CPU"]
        assert document.newline == "\n"

    def test_unchanged_write_is_byte_identical(self, fixture_copy):
        root = fixture_copy("SimpleDependency")
        path = os.path.join(root, "AllProjects.sln")
        with open(path, "rb") as f:
            original = f.read()

        document = read_solution(path)
        write_solution(document, document.lines)

        with open(path, "rb") as f:
            assert f.read() == original

    def test_mixed_terminators_survive_unchanged_write(self, tmp_path):
        path = tmp_path / "Mixed.sln"
        path.write_bytes(b"\xef\xbb\xbf\r\nHeader\nGlobal\r\nEndGlobal")
        document = read_solution(str(path))
        write_solution(document, document.lines)
        assert path.read_bytes() == b"\xef\xbb\xbf\r\nHeader\nGlobal\r\nEndGlobal"

    def test_inserted_lines_use_dominant_terminator(self, tmp_path):
        path = tmp_path / "Mixed.sln"
        path.write_bytes(b"Header\r\nGlobal\nEndGlobal\n")
        document = read_solution(str(path))
        write_solution(document, ["Header", "Inserted", "Global", "EndGlobal"])
        assert path.read_bytes() == b"\xef\xbb\xbfHeader\r\nInserted\nGlobal\nEndGlobal\n"

    def test_write_adds_bom(self, tmp_path):
        path = tmp_path / "NoBom.sln"
        path.write_bytes(b"Global\nEndGlobal\n")
        document = read_solution(str(path))
        write_solution(document, document.lines)
        assert path.read_bytes() == b"\xef\xbb\xbfGlobal\nEndGlobal\n"


class TestDependenciesFolder:
    def test_existing_folder(self):
        document = read_solution(os.path.join(SIMPLE_DIR, "AllProjects.sln"))
        assert try_get_dependencies_folder_guid(document) == (True, "{DA34CE5D-031A-4C97-8DE8-A81F98C0288A}")

    def test_missing_folder_generates_guid(self):
        document = read_solution(os.path.join(SIMPLE_DIR, "FromPerspective_A_Unpopulated.sln"))
        found, guid = try_get_dependencies_folder_guid(document)
        assert not found
        assert guid.startswith("{") and guid.endswith("}")
        assert len(guid) == 38

    def test_generated_guid_is_used_when_patched(self, fixed_folder_guid):
        document = read_solution(os.path.join(SIMPLE_DIR, "FromPerspective_A_Unpopulated.sln"))
        assert try_get_dependencies_folder_guid(document) == (False, fixed_folder_guid)

    def test_two_folders_are_ambiguous(self, tmp_path):
        lines = _solution_lines(
            (FOLDER_TYPE, "Dependencies", "Dependencies", "{11111111-1111-1111-1111-111111111111}"),
            (FOLDER_TYPE, "Dependencies", "Dependencies", "{22222222-2222-2222-2222-222222222222}"),
        )
        document = parse_solution(lines, str(tmp_path / "x.sln"))
        with pytest.raises(AmbiguousDependenciesFolderError):
            try_get_dependencies_folder_guid(document)

    def test_project_named_dependencies_is_not_a_folder(self, tmp_path):
        lines = _solution_lines(
            (CSHARP_TYPE, "Dependencies", "Dependencies\\Dependencies.csproj", "{33333333-3333-3333-3333-333333333333}"),
        )
        document = parse_solution(lines, str(tmp_path / "x.sln"))
        found, _ = try_get_dependencies_folder_guid(document)
        assert not found
