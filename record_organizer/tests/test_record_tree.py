"""
Tests for rebuilding record trees from flat lists.

Tests cover:
- Root folders before parentless requests
- Nesting of folders and requests
- Input order kept inside folders
- Silent omission of records with dangling parents
- Folders placed at most once
- Property-based checks over random forests
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from hypothesis import given, settings
from hypothesis import strategies as st

from record_organizer.services.record_tree import build_record_tree, record_to_node


# ---------------------------------------------------------------------------
# Lightweight stand-ins for ORM models (build_record_tree only reads attrs)
# ---------------------------------------------------------------------------

@dataclass
class FakeHeader:
    id: str
    key: str
    value: str
    is_active: bool = True
    sort: int = 0


@dataclass
class FakeRecord:
    """Minimal stand-in for the Record ORM model."""
    id: str
    category: str = "request"
    pid: Optional[str] = None
    name: str = "Record"
    url: str = "https://example.com"
    method: str = "GET"
    body: Optional[str] = None
    test: Optional[str] = None
    sort: int = 0
    collection_id: str = "c1"
    headers: list = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


def folder(record_id, pid=None, sort=0):
    return FakeRecord(id=record_id, category="folder", pid=pid, name=record_id, sort=sort)


def request(record_id, pid=None, sort=0):
    return FakeRecord(id=record_id, category="request", pid=pid, name=record_id, sort=sort)


def ids(nodes):
    return [node["id"] for node in nodes]


# ============== record_to_node Tests ==============


class TestRecordToNode:
    def test_folder_node_has_children(self):
        node = record_to_node(folder("f1"))
        assert node["children"] == []

    def test_request_node_has_no_children_key(self):
        node = record_to_node(request("r1"))
        assert "children" not in node

    def test_headers_are_copied(self):
        record = request("r1")
        record.headers = [FakeHeader(id="h1", key="A", value="1", is_active=False, sort=1)]
        node = record_to_node(record)
        assert node["headers"] == [
            {"id": "h1", "key": "A", "value": "1", "is_active": False, "sort": 1}
        ]


# ============== build_record_tree Tests ==============


class TestBuildRecordTree:
    def test_empty_input(self):
        assert build_record_tree([]) == []

    def test_parentless_request_follows_folder(self):
        """A parentless request comes after root folders even when it arrives first."""
        folder_a = folder("folderA")
        leaf_x = request("leafX")
        req_b = request("reqB", pid="folderA")

        tree = build_record_tree([folder_a, leaf_x, req_b])

        assert ids(tree) == ["folderA", "leafX"]
        assert ids(tree[0]["children"]) == ["reqB"]
        assert "children" not in tree[1]

    def test_parentless_requests_after_all_folders_regardless_of_sort(self):
        records = [
            request("r1", sort=1),
            folder("f1", sort=2),
            request("r2", sort=3),
            folder("f2", sort=4),
        ]
        tree = build_record_tree(records)
        assert ids(tree) == ["f1", "f2", "r1", "r2"]

    def test_nested_folders(self):
        records = [
            folder("gp"),
            folder("p", pid="gp"),
            folder("c", pid="p"),
            request("leaf", pid="c"),
        ]
        tree = build_record_tree(records)

        assert ids(tree) == ["gp"]
        assert ids(tree[0]["children"]) == ["p"]
        assert ids(tree[0]["children"][0]["children"]) == ["c"]
        assert ids(tree[0]["children"][0]["children"][0]["children"]) == ["leaf"]

    def test_children_keep_input_order(self):
        """Folders and requests inside a folder are not regrouped."""
        records = [
            folder("root"),
            request("r1", pid="root", sort=9),
            folder("sub", pid="root", sort=1),
            request("r2", pid="root", sort=5),
        ]
        tree = build_record_tree(records)
        assert ids(tree[0]["children"]) == ["r1", "sub", "r2"]

    def test_child_listed_before_parent(self):
        records = [request("r1", pid="f1"), folder("f1")]
        tree = build_record_tree(records)
        assert ids(tree) == ["f1"]
        assert ids(tree[0]["children"]) == ["r1"]

    def test_dangling_request_is_omitted(self):
        records = [folder("f1"), request("r1", pid="missing")]
        tree = build_record_tree(records)
        assert ids(tree) == ["f1"]
        assert tree[0]["children"] == []

    def test_dangling_folder_and_its_subtree_are_omitted(self):
        records = [
            folder("f1"),
            folder("lost", pid="missing"),
            request("under-lost", pid="lost"),
        ]
        tree = build_record_tree(records)
        assert ids(tree) == ["f1"]
        assert tree[0]["children"] == []

    def test_request_is_never_a_parent(self):
        records = [request("r1"), request("r2", pid="r1")]
        tree = build_record_tree(records)
        assert ids(tree) == ["r1"]
        assert "children" not in tree[0]

    def test_self_parented_folder_is_omitted(self):
        records = [folder("f1"), folder("loop", pid="loop")]
        tree = build_record_tree(records)
        assert ids(tree) == ["f1"]

    def test_parent_cycle_is_omitted(self):
        records = [folder("a", pid="b"), folder("b", pid="a"), folder("root")]
        tree = build_record_tree(records)
        assert ids(tree) == ["root"]
        assert tree[0]["children"] == []

    def test_duplicate_folder_is_placed_once(self):
        records = [folder("f1"), folder("f1"), request("r1", pid="f1")]
        tree = build_record_tree(records)
        assert ids(tree) == ["f1"]
        assert ids(tree[0]["children"]) == ["r1"]

    def test_empty_string_pid_counts_as_root(self):
        records = [folder("f1", pid=""), request("r1", pid="")]
        tree = build_record_tree(records)
        assert ids(tree) == ["f1", "r1"]


# ---------------------------------------------------------------------------
# Hypothesis strategies
# ---------------------------------------------------------------------------

@st.composite
def flat_records(draw: st.DrawFn):
    """
    Generate a shuffled flat list of folders and requests.

    Folder parents are None, an earlier folder, or a dangling id, so the
    structure is always a forest plus some unreachable records.
    """
    n_folders = draw(st.integers(min_value=0, max_value=12))
    folders: list[FakeRecord] = []
    for i in range(n_folders):
        choices = [None, f"missing-{i}"] + [f.id for f in folders]
        folders.append(folder(f"f{i}", pid=draw(st.sampled_from(choices))))

    n_requests = draw(st.integers(min_value=0, max_value=15))
    requests: list[FakeRecord] = []
    for i in range(n_requests):
        choices = [None, f"gone-{i}"] + [f.id for f in folders]
        requests.append(request(f"r{i}", pid=draw(st.sampled_from(choices))))

    records = draw(st.permutations(folders + requests))
    return list(records)


def reachable_ids(records: list[FakeRecord]) -> set[str]:
    """Ids of records whose ancestor chain ends at a collection root."""
    by_id = {r.id: r for r in records}
    result: set[str] = set()

    def reaches_root(record: FakeRecord) -> bool:
        current = record
        while current.pid is not None:
            parent = by_id.get(current.pid)
            if parent is None or parent.category != "folder":
                return False
            current = parent
        return True

    for record in records:
        if reaches_root(record):
            result.add(record.id)
    return result


def walk(nodes: list[dict]):
    for node in nodes:
        yield node
        yield from walk(node.get("children") or [])


class TestBuildRecordTreeProperties:
    @given(records=flat_records())
    @settings(max_examples=150)
    def test_placed_records_are_exactly_the_reachable_ones(self, records):
        tree = build_record_tree(records)
        placed = [node["id"] for node in walk(tree)]

        assert len(placed) == len(set(placed))
        assert set(placed) == reachable_ids(records)

    @given(records=flat_records())
    @settings(max_examples=150)
    def test_root_folders_precede_root_requests(self, records):
        tree = build_record_tree(records)
        categories = [node["category"] for node in tree]
        if "request" in categories:
            first_request = categories.index("request")
            assert "folder" not in categories[first_request:]

    @given(records=flat_records())
    @settings(max_examples=150)
    def test_children_reference_their_parent(self, records):
        tree = build_record_tree(records)

        def check(nodes, expected_parent):
            for node in nodes:
                if expected_parent is None:
                    assert not node["pid"]
                else:
                    assert node["pid"] == expected_parent
                check(node.get("children") or [], node["id"])

        check(tree, None)

    @given(records=flat_records())
    @settings(max_examples=150)
    def test_only_folders_have_children(self, records):
        for node in walk(build_record_tree(records)):
            assert ("children" in node) == (node["category"] == "folder")

    @given(records=flat_records())
    @settings(max_examples=150)
    def test_children_follow_input_order(self, records):
        position = {r.id: i for i, r in enumerate(records)}
        for node in walk(build_record_tree(records)):
            child_positions = [position[c["id"]] for c in node.get("children") or []]
            assert child_positions == sorted(child_positions)
