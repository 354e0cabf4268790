"""Unit tests for the inventory scanner."""

import logging

import pytest

from legacy_labeler.core import inventory_scanner
from legacy_labeler.core.inventory_scanner import InventoryScanner, generate_document_id


@pytest.mark.unit
class TestDocumentId:
    """Identity derived from the relative path"""

    def test_same_path_same_id(self):
        """Happy path: id is a pure function of the relative path"""
        assert generate_document_id("a/scan001.pdf") == generate_document_id("a/scan001.pdf")

    def test_different_paths_different_ids(self):
        assert generate_document_id("a/scan001.pdf") != generate_document_id("b/scan001.pdf")

    def test_windows_separators_normalised(self):
        assert generate_document_id("a\\scan001.pdf") == generate_document_id("a/scan001.pdf")

    def test_id_format(self):
        doc_id = generate_document_id("scan001.pdf")
        assert doc_id.startswith("doc_")
        assert len(doc_id) == 20
        int(doc_id[4:], 16)


@pytest.mark.unit
class TestScan:
    """Directory walking and filtering"""

    async def test_missing_root_is_created(self, documents_root):
        """Bootstrap: a missing folder is created and the scan is empty"""
        scanner = InventoryScanner(str(documents_root))

        assert await scanner.scan() == []
        assert documents_root.is_dir()
        assert await scanner.scan() == []

    async def test_filters_supported_extensions(self, documents_root, make_document):
        make_document("scan001.pdf")
        make_document("photo.JPG")
        make_document("plan.tif")
        make_document("notes.txt")
        make_document("README")

        descriptors = await InventoryScanner(str(documents_root)).scan()

        names = sorted(d.original_filename for d in descriptors)
        assert names == ["photo.JPG", "plan.tif", "scan001.pdf"]
        types = {d.original_filename: d.file_type for d in descriptors}
        assert types["photo.JPG"] == "jpg"

    async def test_recurses_into_subfolders(self, documents_root, make_document):
        make_document("plant/area1/pump.pdf", size=2048)

        [descriptor] = await InventoryScanner(str(documents_root)).scan()

        assert descriptor.relative_path == "plant/area1/pump.pdf"
        assert descriptor.original_filename == "pump.pdf"
        assert descriptor.file_size == 2048
        assert descriptor.id == generate_document_id("plant/area1/pump.pdf")

    async def test_ids_stable_across_scans(self, documents_root, make_document):
        """Identity stability: two scans give the same ids"""
        make_document("scan001.pdf")
        make_document("sub/scan002.png")
        scanner = InventoryScanner(str(documents_root))

        first = {d.relative_path: d.id for d in await scanner.scan()}
        second = {d.relative_path: d.id for d in await scanner.scan()}

        assert first == second

    async def test_ids_survive_relocation(self, tmp_path, make_document):
        """Moving the whole folder keeps ids since they use relative paths"""
        make_document("box1/scan.pdf", root=tmp_path / "old")
        make_document("box1/scan.pdf", root=tmp_path / "new")

        [old] = await InventoryScanner(str(tmp_path / "old")).scan()
        [new] = await InventoryScanner(str(tmp_path / "new")).scan()

        assert old.id == new.id

    async def test_unreadable_file_is_skipped(self, documents_root, make_document, monkeypatch, caplog):
        """Failure policy: one bad file does not abort the scan"""
        make_document("good.pdf")
        make_document("bad.pdf")
        real_stat = inventory_scanner._stat_document

        def flaky_stat(path):
            if path.endswith("bad.pdf"):
                raise PermissionError(13, "Permission denied", path)
            return real_stat(path)

        monkeypatch.setattr(inventory_scanner, "_stat_document", flaky_stat)

        with caplog.at_level(logging.WARNING):
            descriptors = await InventoryScanner(str(documents_root)).scan()

        assert [d.original_filename for d in descriptors] == ["good.pdf"]
        assert "bad.pdf" in caplog.text

    async def test_custom_extensions(self, documents_root, make_document):
        make_document("a.pdf")
        make_document("b.bmp")

        descriptors = await InventoryScanner(str(documents_root), extensions=[".BMP"]).scan()

        assert [d.original_filename for d in descriptors] == ["b.bmp"]

    async def test_discovered_at_shared_by_scan(self, documents_root, make_document):
        make_document("a.pdf")
        make_document("b.pdf")

        descriptors = await InventoryScanner(str(documents_root)).scan()

        assert len({d.discovered_at for d in descriptors}) == 1
        assert descriptors[0].discovered_at.tzinfo is not None

    async def test_permission_denied_file_is_skipped(self, documents_root, make_document, monkeypatch, caplog):
        """A file that stats fine but cannot be opened for reading is skipped"""
        make_document("good.pdf")
        make_document("locked.pdf")
        monkeypatch.setattr(
            inventory_scanner, "_is_readable", lambda path: not path.endswith("locked.pdf")
        )

        with caplog.at_level(logging.WARNING):
            descriptors = await InventoryScanner(str(documents_root)).scan()

        assert [d.original_filename for d in descriptors] == ["good.pdf"]
        assert "locked.pdf" in caplog.text

    async def test_root_that_is_a_file(self, documents_root, caplog):
        """A documents root occupied by a regular file gives an empty scan"""
        documents_root.write_bytes(b"not a folder")

        with caplog.at_level(logging.WARNING):
            descriptors = await InventoryScanner(str(documents_root)).scan()

        assert descriptors == []
        assert documents_root.is_file()
        assert "not a folder" in caplog.text
