"""Output naming and directory layout."""

from dataclasses import dataclass
from pathlib import Path

from line_splitter.classify.types import OutputClass
from line_splitter.errors import ConfigurationError

OUTPUT_SUFFIX = ".txt"

# Sub-folder per class in binary-split mode; filter output goes to the root.
CLASS_DIRECTORIES = {
    OutputClass.MATCH: "matches",
    OutputClass.NON_MATCH: "non-matches",
}


def part_file_name(base_name: str, label: str | None, part_number: int | None) -> str:
    """
    Build a part file name.

    ``part_number`` is None when chunking is disabled, which drops the
    ``_part####`` suffix.
    """
    stem = base_name if label is None else f"{base_name}_{label}"
    if part_number is None:
        return f"{stem}{OUTPUT_SUFFIX}"
    return f"{stem}_part{part_number:04d}{OUTPUT_SUFFIX}"


@dataclass(frozen=True, slots=True)
class OutputLayout:
    """Maps output classes to the folders their part files live in."""

    root: Path

    def directory_for(self, output_class: OutputClass) -> Path:
        sub_dir = CLASS_DIRECTORIES.get(output_class)
        return self.root if sub_dir is None else self.root / sub_dir

    def prepare(self, classes: tuple[OutputClass, ...]) -> list[Path]:
        """Create the folders for ``classes`` and return them."""
        directories = [self.directory_for(output_class) for output_class in classes]
        for directory in directories:
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise ConfigurationError(
                    f"Cannot create output folder {directory}: {exc.strerror or exc}", directory
                ) from exc
        return directories
