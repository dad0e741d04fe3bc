"""Tests for item membership: add, move, reorder, remove."""

import logging

import pytest

from contextforge.exceptions import FolderNotFoundError, ItemsNotFoundError
from contextforge.models import ItemFolderLink
from contextforge.services.item_links import ItemFolderLinkManager


@pytest.fixture()
def links(db) -> ItemFolderLinkManager:
    return ItemFolderLinkManager(db)


def _positions(db, folder_id):
    db.expire_all()
    rows = db.query(ItemFolderLink).filter(ItemFolderLink.folder_id == folder_id).all()
    return {row.item_id: row.position for row in rows}


class TestAddItems:

    def test_default_positions_start_at_one(self, db, links, owner, make_folder, make_item):
        folder = make_folder("F")
        x, y, z = make_item("x"), make_item("y"), make_item("z")

        assert links.add_items(owner, folder.id, [x, y, z]) == 3
        assert _positions(db, folder.id) == {x: 1, y: 2, z: 3}

    def test_default_positions_append_after_last(self, db, links, owner, make_folder, make_item):
        folder = make_folder("F")
        x, y = make_item("x"), make_item("y")
        links.add_items(owner, folder.id, [x], position=7)
        links.add_items(owner, folder.id, [y])
        assert _positions(db, folder.id) == {x: 7, y: 8}

    def test_explicit_position(self, db, links, owner, make_folder, make_item):
        folder = make_folder("F")
        x, y, z = make_item("x"), make_item("y"), make_item("z")
        links.add_items(owner, folder.id, [x, y, z], position=10)
        assert _positions(db, folder.id) == {x: 10, y: 11, z: 12}

    def test_missing_item_fails_whole_batch(self, db, links, owner, make_folder, make_item):
        folder = make_folder("F")
        x = make_item("x")
        with pytest.raises(ItemsNotFoundError) as exc_info:
            links.add_items(owner, folder.id, [x, "item-missing"])
        assert exc_info.value.details["missing_item_ids"] == ["item-missing"]
        assert _positions(db, folder.id) == {}

    def test_foreign_item_is_missing(self, links, owner, other_owner, make_folder, make_item):
        folder = make_folder("F")
        theirs = make_item("theirs", owner_id=other_owner)
        with pytest.raises(ItemsNotFoundError):
            links.add_items(owner, folder.id, [theirs])

    def test_foreign_folder_is_not_found(self, links, owner, other_owner, make_folder, make_item):
        theirs = make_folder("Theirs", owner_id=other_owner)
        with pytest.raises(FolderNotFoundError):
            links.add_items(owner, theirs.id, [make_item()])

    def test_existing_link_is_repositioned_not_duplicated(self, db, links, owner, make_folder, make_item):
        folder = make_folder("F")
        x, y = make_item("x"), make_item("y")
        links.add_items(owner, folder.id, [x, y])
        assert links.add_items(owner, folder.id, [x], position=20) == 1
        assert _positions(db, folder.id) == {x: 20, y: 2}

    def test_duplicate_ids_keep_first_occurrence(self, db, links, owner, make_folder, make_item):
        folder = make_folder("F")
        x, y = make_item("x"), make_item("y")
        assert links.add_items(owner, folder.id, [x, y, x]) == 2
        assert _positions(db, folder.id) == {x: 1, y: 2}

    def test_item_can_live_in_several_folders(self, db, links, owner, make_folder, make_item):
        a, b = make_folder("A"), make_folder("B")
        x = make_item("x")
        links.add_items(owner, a.id, [x])
        links.add_items(owner, b.id, [x], position=5)
        assert _positions(db, a.id) == {x: 1}
        assert _positions(db, b.id) == {x: 5}


class TestMoveItems:

    def test_move_skips_unlinked_ids(self, db, links, owner, make_folder, make_item):
        source, target = make_folder("Source"), make_folder("Target")
        x, y = make_item("x"), make_item("y")
        links.add_items(owner, source.id, [x])

        moved = links.move_items(owner, source.id, target.id, [x, y])

        assert moved == 1
        assert _positions(db, source.id) == {}
        assert _positions(db, target.id) == {x: 0}

    def test_move_with_position(self, db, links, owner, make_folder, make_item):
        source, target = make_folder("Source"), make_folder("Target")
        x, y = make_item("x"), make_item("y")
        links.add_items(owner, source.id, [x, y])
        assert links.move_items(owner, source.id, target.id, [x, y], position=4) == 2
        assert _positions(db, target.id) == {x: 4, y: 4}

    def test_move_onto_existing_target_link(self, db, links, owner, make_folder, make_item):
        source, target = make_folder("Source"), make_folder("Target")
        x = make_item("x")
        links.add_items(owner, source.id, [x])
        links.add_items(owner, target.id, [x], position=9)

        assert links.move_items(owner, source.id, target.id, [x], position=2) == 1
        assert _positions(db, source.id) == {}
        assert _positions(db, target.id) == {x: 2}

    def test_missing_source_named_in_error(self, links, owner, make_folder):
        target = make_folder("Target")
        with pytest.raises(FolderNotFoundError) as exc_info:
            links.move_items(owner, "fld-missing", target.id, ["x"])
        assert exc_info.value.message.startswith("Source folder")

    def test_missing_target_named_in_error(self, links, owner, make_folder):
        source = make_folder("Source")
        with pytest.raises(FolderNotFoundError) as exc_info:
            links.move_items(owner, source.id, "fld-missing", ["x"])
        assert exc_info.value.message.startswith("Target folder")

    def test_move_within_same_folder_repositions_and_logs(self, db, links, owner, make_folder, make_item, caplog):
        folder = make_folder("F")
        x, y = make_item("x"), make_item("y")
        links.add_items(owner, folder.id, [x, y])

        with caplog.at_level(logging.INFO, logger="contextforge.services.item_links"):
            assert links.move_items(owner, folder.id, folder.id, [x, "unlinked"], position=5) == 1

        assert _positions(db, folder.id) == {x: 5, y: 2}
        assert "Items moved between folders" in caplog.text


class TestReorderItems:

    def test_reorder_applies_positions(self, db, links, owner, make_folder, make_item):
        folder = make_folder("F")
        x, y = make_item("x"), make_item("y")
        links.add_items(owner, folder.id, [x, y])

        updated = links.reorder_items(
            owner, folder.id, [{"item_id": x, "position": 5}, {"item_id": y, "position": 1}]
        )

        assert updated == 2
        assert _positions(db, folder.id) == {x: 5, y: 1}

    def test_reorder_skips_missing_links(self, db, links, owner, make_folder, make_item):
        folder = make_folder("F")
        x = make_item("x")
        links.add_items(owner, folder.id, [x])
        updated = links.reorder_items(
            owner, folder.id, [{"item_id": x, "position": 3}, {"item_id": "nope", "position": 1}]
        )
        assert updated == 1

    def test_reorder_foreign_folder_is_not_found(self, links, owner, other_owner, make_folder):
        theirs = make_folder("Theirs", owner_id=other_owner)
        with pytest.raises(FolderNotFoundError):
            links.reorder_items(owner, theirs.id, [])


class TestRemoveItems:

    def test_remove_counts_only_deleted_links(self, db, links, owner, make_folder, make_item):
        folder = make_folder("F")
        x, y = make_item("x"), make_item("y")
        links.add_items(owner, folder.id, [x, y])
        assert links.remove_items(owner, folder.id, [x, "nope"]) == 1
        assert _positions(db, folder.id) == {y: 2}


class TestListItems:

    def test_ordered_by_position(self, links, owner, make_folder, make_item):
        folder = make_folder("F")
        x, y, z = make_item("x"), make_item("y"), make_item("z")
        links.add_items(owner, folder.id, [x, y, z])
        links.reorder_items(owner, folder.id, [{"item_id": z, "position": 0}])
        listed = links.list_items(folder.id)
        assert [link.item_id for link in listed] == [z, x, y]
        assert listed[0].item.name == "z"
