"""
Parser for the bin list: the observable bins to build an ipol for.
"""
from collections import namedtuple
from pathlib import Path
from typing import List

from ..errors import ConfigurationError

BinDescriptor = namedtuple("BinDescriptor", ["name", "index"])


def bin_identifier(bin_descriptor: BinDescriptor) -> str:
    return f"{bin_descriptor.name}#{bin_descriptor.index}"


def parse_bin_line(line: str):
    """
    Parses one '<name>#<index>' entry. Returns None for lines without '#'.

    The name is everything before the last '#', so names may contain '#'.
    """
    line = line.strip()
    name, sep, index = line.rpartition('#')
    if not sep:
        return None
    try:
        return BinDescriptor(name=name, index=int(index))
    except ValueError:
        raise ConfigurationError(f"Invalid bin index in bin list entry '{line}'") from None


def read_bin_list(file_path: Path) -> List[BinDescriptor]:
    """
    Reads a bin list file, one '<observable-name>#<bin-index>' per line.

    Lines without a '#' are skipped.

    Args:
        file_path (Path): Path of the bin list.

    Returns:
        The BinDescriptors in file order.
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise ConfigurationError(f"Bin list {file_path} not found.")

    bins = []
    with open(file_path, 'r', encoding='UTF-8') as f:
        for line in f:
            bin_descriptor = parse_bin_line(line)
            if bin_descriptor is not None:
                bins.append(bin_descriptor)
    return bins
