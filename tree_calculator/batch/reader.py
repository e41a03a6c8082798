"""Load expression files, plain or archived."""
from pathlib import Path
import tarfile
import tempfile
import zipfile

import py7zr
from pydantic import BaseModel, ConfigDict, FilePath

from tree_calculator.common.errors import ArchiveError
from tree_calculator.common.logger import logger


class ExpressionReader(BaseModel):
    """
    Read the text of an expression file.

    Supported inputs:
    - plain .txt files
    - .zip, .tar.xz and .7z archives, from which the first .txt member is read
    """

    model_config = ConfigDict(frozen=True)

    encoding: str = "utf-8"

    def read(self, input_file: FilePath) -> str:
        """
        Return the text content of a plain file or of an archive.

        :param FilePath input_file: Path to a .txt file or a supported archive

        :return: Text content holding one expression per line
        :rtype: str
        :raises ArchiveError: If the archive format is unsupported or contains no .txt file
        """
        if input_file.suffix == ".txt":
            return input_file.read_text(encoding=self.encoding)
        logger.info(f"📦 Extracting expressions from {input_file.name}")
        return self._extract_archive(input_file)

    def _extract_archive(self, archive_path: FilePath) -> str:
        """
        Extract the first .txt file found in a supported archive and return its content.

        :param FilePath archive_path: Path to the archive file

        :return: Content of the extracted .txt file
        :rtype: str
        :raises ArchiveError: If no .txt file is found or format is unsupported
        """
        # Extract into a temporary directory removed on exit
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir_path = Path(tmpdir)
            if archive_path.suffix == ".zip":
                with zipfile.ZipFile(archive_path, "r") as zf:
                    txt_files = [f for f in zf.namelist() if f.endswith(".txt")]
                    if not txt_files:
                        raise ArchiveError("📄❌ No .txt file found in zip archive")
                    zf.extract(txt_files[0], path=tmpdir_path)
                    return (tmpdir_path / txt_files[0]).read_text(encoding=self.encoding)

            elif archive_path.suffixes[-2:] == [".tar", ".xz"]:
                with tarfile.open(archive_path, "r:xz") as tf:
                    members = [m for m in tf.getmembers() if m.isfile() and m.name.endswith(".txt")]
                    if not members:
                        raise ArchiveError("📄❌ No .txt file found in tar.xz archive")
                    tf.extract(members[0], path=tmpdir_path, filter="data")
                    return (tmpdir_path / members[0].name).read_text(encoding=self.encoding)

            elif archive_path.suffix == ".7z":
                with py7zr.SevenZipFile(archive_path, mode="r") as archive:
                    txt_files = [f for f in archive.getnames() if f.endswith(".txt")]
                    if not txt_files:
                        raise ArchiveError("📄❌ No .txt file found in 7z archive")
                    archive.extract(path=tmpdir_path, targets=[txt_files[0]])
                    return (tmpdir_path / txt_files[0]).read_text(encoding=self.encoding)

            else:
                raise ArchiveError(f"📄❌ Unsupported archive format: {archive_path.suffix}")
