"""
Tests for cfgfs.tree package.

Tests tree construction including:
- The rc-file naming convention
- Reuse of existing directories and files
- Ordering of children and lines
- Naming conflicts under both policies
- The entry index and freezing
"""

from __future__ import annotations

import pytest

from cfgfs.exceptions import ConfigError, MalformedLineError, PathConflictError
from cfgfs.tree.builder import PathConflict, SkippedSetting, TreeBuilder
from cfgfs.tree.index import EntryIndex
from cfgfs.tree.nodes import Directory, File, SettingLine, node_kind


def _build(lines, **kwargs):
    builder = TreeBuilder(**kwargs)
    for number, line in enumerate(lines, start=1):
        builder.add_line(line, number)
    return builder.build()


class TestNodes:
    """Tests for node types."""

    def test_setting_line_rendered(self):
        """Test the exact rendered form of a setting line."""
        assert SettingLine(key="driver", value="opengl").rendered == "driver opengl\n"

    def test_file_render_concatenates_in_order(self):
        """Test that file content joins rendered lines in insertion order."""
        f = File(name="brc")
        f.append("c", "value1")
        f.append("d", "value2")

        assert f.render() == "c value1\nd value2\n"
        assert f.content() == b"c value1\nd value2\n"

    def test_file_content_uses_encoding(self):
        """Test that content is encoded with the requested codec."""
        f = File(name="xrc")
        f.append("name", "café")

        assert f.content("utf-8") == "name café\n".encode("utf-8")
        assert f.content("latin-1") == "name café\n".encode("latin-1")

    def test_directory_child_names_dirs_first(self):
        """Test that directories precede files in child_names."""
        d = Directory(name="a")
        d.files.append(File(name="xrc"))
        d.directories.append(Directory(name="b"))

        assert d.child_names() == ["b", "xrc"]

    def test_node_kind(self):
        """Test naming the node variants."""
        assert node_kind(Directory(name="a")) == "directory"
        assert node_kind(File(name="arc")) == "file"
        with pytest.raises(TypeError):
            node_kind("not a node")


class TestEntryIndex:
    """Tests for EntryIndex."""

    def test_get_missing_returns_none(self):
        """Test that an unknown path is absent."""
        assert EntryIndex().get("/nope") is None

    def test_set_and_get(self):
        """Test registering and looking up a node."""
        index = EntryIndex()
        node = Directory(name="a")
        index.set("/a", node)

        assert index.get("/a") is node
        assert "/a" in index
        assert len(index) == 1
        assert index.paths() == ["/a"]

    def test_duplicate_path_raises(self):
        """Test that a path cannot be registered twice."""
        index = EntryIndex()
        index.set("/a", Directory(name="a"))

        with pytest.raises(ValueError, match="already registered"):
            index.set("/a", File(name="a"))

    def test_frozen_index_rejects_set(self):
        """Test that no registration is possible after freeze."""
        index = EntryIndex()
        index.freeze()

        assert index.frozen
        with pytest.raises(RuntimeError, match="frozen"):
            index.set("/a", Directory(name="a"))


class TestTreeBuilder:
    """Tests for TreeBuilder construction."""

    def test_root_exists_with_root_file(self):
        """Test that an empty source still has / and the root file."""
        tree = _build([])

        assert isinstance(tree.get("/"), Directory)
        assert isinstance(tree.get("/mednafenrc"), File)
        assert tree.root.child_names() == ["mednafenrc"]

    def test_sample_configuration(self, sample_tree):
        """Test the reference mednafen-style configuration."""
        root = sample_tree.get("/")
        assert root.child_names() == ["input", "mednafenrc", "videorc"]

        assert sample_tree.get("/videorc").render() == "driver opengl\n"
        assert sample_tree.get("/input/port1rc").render() == "type gamepad\n"
        assert sample_tree.get("/mednafenrc").render() == "fullscreen 1\n"
        assert sample_tree.get("/input").child_names() == ["port1rc"]

    def test_sample_counts(self, sample_tree):
        """Test that lines and applied settings are counted."""
        assert sample_tree.lines_read == 5
        assert sample_tree.settings_applied == 3
        assert sample_tree.conflicts == []

    def test_leading_whitespace_goes_to_root_file(self):
        """Test that a line with an empty setting path lands in the root file."""
        tree = _build(["  fullscreen 1", "video.driver opengl"])

        assert tree.get("/mednafenrc").render() == " fullscreen 1\n"
        assert tree.settings_applied == 2

    def test_files_in_creation_order(self, sample_tree):
        """Test that files() lists every file with its path."""
        assert [path for path, _ in sample_tree.files()] == [
            "/mednafenrc",
            "/videorc",
            "/input/port1rc",
        ]
        assert all(isinstance(node, File) for _, node in sample_tree.files())

    def test_attach_under_file_raises(self):
        """Test that a node cannot be attached below a file."""
        builder = TreeBuilder()

        with pytest.raises(TypeError, match="not a directory"):
            builder._attach("/mednafenrc", "/mednafenrc/x", Directory(name="x"))

    def test_shared_section_prefix_aggregates(self):
        """Test that settings with the same section go to one file."""
        tree = _build(["a.b.c value1", "a.b.d value2"])

        assert tree.get("/a/brc").render() == "c value1\nd value2\n"
        assert tree.get("/a").child_names() == ["brc"]
        assert tree.get("/a/b") is None

    def test_deep_section_creates_all_directories(self):
        """Test that every non-leaf level becomes a directory."""
        tree = _build(["s1.s2.s3.s4.key value"])

        for path in ("/s1", "/s1/s2", "/s1/s2/s3"):
            assert isinstance(tree.get(path), Directory)
        rc_file = tree.get("/s1/s2/s3/s4rc")
        assert isinstance(rc_file, File)
        assert rc_file.name == "s4rc"
        assert tree.get("/s1/s2/s3").child_names() == ["s4rc"]

    def test_directories_registered_before_file(self):
        """Test that ancestors are registered before the rc-file."""
        tree = _build(["a.b.c.key v"])

        assert tree.index.paths() == ["/", "/mednafenrc", "/a", "/a/b", "/a/b/crc"]

    def test_directory_and_file_can_coexist_under_different_paths(self):
        """Test that a section can be both a directory and, with rc, a file."""
        tree = _build(["a.b.c.k v1", "a.b.k v2"])

        assert isinstance(tree.get("/a/b"), Directory)
        assert tree.get("/a/brc").render() == "k v2\n"
        assert tree.get("/a").child_names() == ["b", "brc"]

    def test_children_in_creation_order(self):
        """Test that siblings keep the order they were created in."""
        tree = _build(
            [
                "z.one.k v",
                "a.k v",
                "m.two.k v",
                "z.k v",
            ]
        )

        assert tree.root.child_names() == ["z", "m", "mednafenrc", "arc", "zrc"]

    def test_existing_directory_is_reused(self):
        """Test that a directory is created once however often it is seen."""
        tree = _build(["input.port1.type gamepad", "input.port2.type mouse"])

        assert len(tree.root.directories) == 1
        assert tree.get("/input").child_names() == ["port1rc", "port2rc"]

    def test_line_order_preserved_across_interleaving(self):
        """Test that file lines follow source order even when interleaved."""
        tree = _build(["video.a 1", "sound.x 2", "video.b 3", "video.a 4"])

        assert tree.get("/videorc").render() == "a 1\nb 3\na 4\n"

    def test_dotted_setting_can_reach_root_file(self):
        """Test that a section named like the root file reuses it."""
        tree = _build(["fullscreen 1", "mednafen.extra yes"])

        assert tree.get("/mednafenrc").render() == "fullscreen 1\nextra yes\n"
        assert tree.conflicts == []

    def test_custom_root_file_name(self):
        """Test configuring the root settings file name."""
        tree = _build(["fullscreen 1"], root_file_name="rootrc")

        assert tree.get("/rootrc").render() == "fullscreen 1\n"
        assert tree.get("/mednafenrc") is None

    def test_malformed_line_aborts(self):
        """Test that a malformed line raises from add_line."""
        builder = TreeBuilder()
        builder.add_line("video.driver opengl", 1)

        with pytest.raises(MalformedLineError) as exc_info:
            builder.add_line("malformedline", 2)
        assert exc_info.value.line_number == 2

    def test_build_freezes_tree(self):
        """Test that a built tree refuses more lines."""
        builder = TreeBuilder()
        tree = builder.build()

        assert tree.frozen
        with pytest.raises(RuntimeError, match="already built"):
            builder.add_line("video.driver opengl")

    def test_build_is_deterministic(self, sample_lines):
        """Test that the same input yields structurally identical trees."""
        first = _build(sample_lines)
        second = _build(sample_lines)

        assert first.index.paths() == second.index.paths()
        for path in first.index:
            a, b = first.get(path), second.get(path)
            assert node_kind(a) == node_kind(b)
            if isinstance(a, File):
                assert a.lines == b.lines
            else:
                assert a.child_names() == b.child_names()

    @pytest.mark.parametrize("on_conflict", ["", "ignore", "fatal"])
    def test_invalid_conflict_policy(self, on_conflict):
        """Test that only warn and error are accepted."""
        with pytest.raises(ConfigError, match="on_conflict"):
            TreeBuilder(on_conflict=on_conflict)

    @pytest.mark.parametrize("name", ["", "a/b"])
    def test_invalid_root_file_name(self, name):
        """Test that the root file name must be a plain name."""
        with pytest.raises(ConfigError, match="root file name"):
            TreeBuilder(root_file_name=name)


class TestConflicts:
    """Tests for naming conflicts between directories and files."""

    def test_directory_level_taken_by_file_is_recorded(self):
        """Test a non-leaf level that is already registered as a file."""
        tree = _build(["a.b.k v", "a.brc.c.k2 v2"])

        assert tree.conflicts == [
            PathConflict(
                path="/a/brc",
                expected="directory",
                existing="file",
                setting_path="a.brc.c.k2",
                line_number=2,
            )
        ]
        assert tree.get("/a/brc").render() == "k v\n"
        assert tree.get("/a/brc/crc") is None
        assert tree.settings_applied == 1

    def test_file_level_taken_by_directory_is_recorded(self):
        """Test a leaf file path that is already registered as a directory."""
        tree = _build(["a.brc.c.k v", "a.b.k2 v2"])

        assert len(tree.conflicts) == 1
        conflict = tree.conflicts[0]
        assert conflict.path == "/a/brc"
        assert conflict.expected == "file"
        assert conflict.existing == "directory"
        assert isinstance(tree.get("/a/brc"), Directory)

    def test_root_file_conflict(self):
        """Test that the root file cannot be turned into a directory."""
        tree = _build(["mednafenrc.x.k v"])

        assert tree.conflicts[0].path == "/mednafenrc"
        assert tree.get("/mednafenrc/xrc") is None

    def test_conflict_is_logged(self):
        """Test that a recorded conflict is reported as a warning."""

        class RecordingLogger:
            def __init__(self):
                self.warnings = []

            def step(self, step, total, message):
                pass

            def verbose(self, prefix, message):
                pass

            def debug(self, prefix, message):
                pass

            def warning(self, prefix, message):
                self.warnings.append((prefix, message))

        logger = RecordingLogger()
        _build(["a.b.k v", "a.brc.c.k2 v2"], logger=logger)

        assert len(logger.warnings) == 1
        prefix, message = logger.warnings[0]
        assert prefix == "TREE"
        assert "line 2" in message
        assert "/a/brc" in message

    def test_error_policy_raises(self):
        """Test that the error policy aborts on the first conflict."""
        with pytest.raises(PathConflictError) as exc_info:
            _build(["a.b.k v", "a.brc.c.k2 v2"], on_conflict="error")

        conflict = exc_info.value.conflict
        assert conflict.path == "/a/brc"
        assert conflict.line_number == 2

    def test_describe(self):
        """Test the human-readable conflict description."""
        conflict = PathConflict(
            path="/a/brc",
            expected="directory",
            existing="file",
            setting_path="a.brc.c.k",
        )

        assert conflict.describe() == (
            "a.brc.c.k needs a directory at /a/brc but a file is already there; "
            "setting skipped"
        )


class TestEmptySectionNames:
    """Tests for settings whose section path has an empty segment."""

    @pytest.mark.parametrize("setting_path", [".key", "a..b.key", "a.b..key"])
    def test_warn_policy_skips_setting(self, setting_path):
        """Test that the setting is recorded and construction continues."""
        tree = _build([f"{setting_path} v", "video.driver opengl"])

        assert tree.skipped == [
            SkippedSetting(
                setting_path=setting_path,
                reason="empty section name",
                line_number=1,
            )
        ]
        assert tree.index.paths() == ["/", "/mednafenrc", "/videorc"]
        assert tree.settings_applied == 1
        assert tree.conflicts == []

    def test_skip_is_logged(self):
        """Test that a skipped setting is reported as a warning."""
        warnings = []

        class RecordingLogger:
            def step(self, step, total, message):
                pass

            def verbose(self, prefix, message):
                pass

            def debug(self, prefix, message):
                pass

            def warning(self, prefix, message):
                warnings.append((prefix, message))

        _build(["a..b.k v"], logger=RecordingLogger())

        assert warnings == [
            ("TREE", "line 1: empty section name: 'a..b.k'; setting skipped")
        ]

    def test_error_policy_raises(self):
        """Test that the error policy aborts on an empty section name."""
        with pytest.raises(MalformedLineError, match="empty section name") as exc_info:
            _build(["video.driver opengl", ".key v"], on_conflict="error")

        assert exc_info.value.line_number == 2
