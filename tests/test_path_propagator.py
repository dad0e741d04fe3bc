"""Tests for descendant path propagation after renames and moves."""

from unittest.mock import patch

import pytest

from contextforge.models import Folder
from contextforge.repositories.folder_repository import FolderRepository
from contextforge.schemas.folder import FolderUpdate
from contextforge.services.path_propagator import DescendantPathPropagator


def _paths(db, owner_id):
    db.expire_all()
    return {
        f.name: (f.path, f.level)
        for f in db.query(Folder).filter(Folder.owner_id == owner_id).all()
    }


class TestPropagate:

    def test_rename_rewrites_all_descendants(self, db, owner, make_folder, service):
        a = make_folder("A")
        b = make_folder("B", a.id)
        make_folder("C", b.id)

        service.update_folder(owner, a.id, FolderUpdate(name="Z"))

        assert _paths(db, owner) == {
            "Z": ("/Z", 0),
            "B": ("/Z/B", 1),
            "C": ("/Z/B/C", 2),
        }

    def test_move_updates_levels(self, db, owner, make_folder, service):
        target = make_folder("Target")
        deep = make_folder("Deep", target.id)
        a = make_folder("A")
        b = make_folder("B", a.id)
        make_folder("C", b.id)

        service.update_folder(owner, a.id, FolderUpdate(parent_id=deep.id))

        paths = _paths(db, owner)
        assert paths["A"] == ("/Target/Deep/A", 2)
        assert paths["B"] == ("/Target/Deep/A/B", 3)
        assert paths["C"] == ("/Target/Deep/A/B/C", 4)

    def test_name_prefix_sibling_is_untouched(self, db, owner, make_folder, service):
        a = make_folder("A")
        make_folder("Child", a.id)
        ab = make_folder("AB")
        make_folder("Child", ab.id)

        service.update_folder(owner, a.id, FolderUpdate(name="Renamed"))

        rows = {f.path for f in db.query(Folder).filter(Folder.owner_id == owner).all()}
        assert "/AB/Child" in rows
        assert "/Renamed/Child" in rows

    def test_like_wildcards_in_names_are_literal(self, db, owner, make_folder, service):
        pct = make_folder("50%")
        make_folder("Inside", pct.id)
        other = make_folder("50x")
        make_folder("Elsewhere", other.id)

        service.update_folder(owner, pct.id, FolderUpdate(name="Half"))

        paths = _paths(db, owner)
        assert paths["Inside"] == ("/Half/Inside", 1)
        assert paths["Elsewhere"] == ("/50x/Elsewhere", 1)

    def test_other_owners_are_untouched(self, db, owner, other_owner, make_folder, service):
        mine = make_folder("Shared")
        make_folder("Child", mine.id)
        theirs = make_folder("Shared", owner_id=other_owner)
        make_folder("Child", theirs.id, owner_id=other_owner)

        service.update_folder(owner, mine.id, FolderUpdate(name="Mine"))

        assert _paths(db, other_owner) == {"Shared": ("/Shared", 0), "Child": ("/Shared/Child", 1)}

    def test_no_descendants_returns_zero(self, db, owner, make_folder):
        make_folder("Leaf")
        assert DescendantPathPropagator(db).propagate(owner, "/Leaf", "/Other", 0) == 0

    def test_unchanged_path_returns_zero(self, db, owner, make_folder):
        leaf = make_folder("Leaf")
        make_folder("Child", leaf.id)
        assert DescendantPathPropagator(db).propagate(owner, "/Leaf", "/Leaf", 0) == 0

    def test_returns_number_of_descendants(self, db, owner, make_folder):
        a = make_folder("A")
        b = make_folder("B", a.id)
        make_folder("C", b.id)
        make_folder("D", a.id)
        assert DescendantPathPropagator(db).propagate(owner, "/A", "/Q", 0) == 3


class TestAtomicity:
    """A failure part-way through leaves the whole subtree as it was."""

    def test_failure_mid_propagation_rolls_back_everything(self, db, owner, make_folder, service):
        a = make_folder("A")
        b = make_folder("B", a.id)
        make_folder("C", b.id)
        before = _paths(db, owner)

        original = FolderRepository.set_path
        calls = {"n": 0}

        def flaky_set_path(repo, folder, path, level):
            calls["n"] += 1
            # 1st call: the folder itself. 2nd: first descendant. 3rd fails.
            if calls["n"] == 3:
                raise RuntimeError("disk full")
            return original(repo, folder, path, level)

        with patch.object(FolderRepository, "set_path", flaky_set_path):
            with pytest.raises(RuntimeError):
                service.update_folder(owner, a.id, FolderUpdate(name="Z"))

        assert calls["n"] == 3
        assert _paths(db, owner) == before
