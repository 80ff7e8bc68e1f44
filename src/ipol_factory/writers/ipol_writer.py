"""
Text format of an ipol file.

    ParamNames: <name1> ... <nameD>
    MinParamVals: <min1> ... <minD>
    MaxParamVals: <max1> ... <maxD>
    Dimension: <D>
    ---
    <name>#<index> <index> <index+1>
      var: <D> <order> <coefficients...> <mins...> <maxs...>
      err: <D> 0 0 <mins...> <maxs...>

The header (first five lines) is optional; there is one three-line block per
bin, in bin-list order.
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

from ..models.ipol import Ipol, format_number
from ..parsers.bin_list_parser import BinDescriptor, bin_identifier
from ..preprocessing.processor import ParameterSpace

logger = logging.getLogger(__name__)

HEADER_SEPARATOR = "---"
VALUE_VAR = "var"
ERROR_VAR = "err"


def _join_numbers(values) -> str:
    return " ".join(format_number(v) for v in values)


def _bounds(space: ParameterSpace) -> str:
    return f"{_join_numbers(space.mins)} {_join_numbers(space.maxs)}"


def format_header(space: ParameterSpace) -> List[str]:
    return [
        f"ParamNames: {' '.join(space.names)}",
        f"MinParamVals: {_join_numbers(space.mins)}",
        f"MaxParamVals: {_join_numbers(space.maxs)}",
        f"Dimension: {space.dim}",
        HEADER_SEPARATOR,
    ]


def format_ipol_block(bin_descriptor: BinDescriptor, ipol: Ipol, space: ParameterSpace) -> List[str]:
    # The error ipol is a placeholder: order 0 with a single zero coefficient.
    error_ipol = Ipol([0.0], 0, space.mins, space.maxs)
    bounds = _bounds(space)
    return [
        f"{bin_identifier(bin_descriptor)} {bin_descriptor.index} {bin_descriptor.index + 1}",
        f"  {ipol.render(VALUE_VAR)} {bounds}",
        f"  {error_ipol.render(ERROR_VAR)} {bounds}",
    ]


def format_ipol_document(
    space: ParameterSpace,
    bins: Sequence[BinDescriptor],
    ipols: Sequence[Ipol],
    include_header: bool = True
) -> str:
    """
    Renders the whole ipol file.

    Args:
        space (ParameterSpace): Training space; its bounds go in the header and
                                in every block.
        bins: The bins, in bin-list order.
        ipols: The selected ipol of each bin, same order as ``bins``.
        include_header (bool): Whether to start with the parameter header.
    """
    if len(bins) != len(ipols):
        raise ValueError(f"Got {len(ipols)} ipols for {len(bins)} bins.")

    lines = format_header(space) if include_header else []
    for bin_descriptor, ipol in zip(bins, ipols):
        lines.extend(format_ipol_block(bin_descriptor, ipol, space))
    return "".join(f"{line}\n" for line in lines)


def write_ipol_file(file_path, document: str) -> Path:
    """Writes a rendered document in one go."""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(document, encoding='utf-8')
    logger.info("Ipols written to %s", file_path)
    return file_path


def _parse_header(lines: List[str]) -> Dict[str, Any]:
    header = {}
    for line in lines:
        key, _, value = line.partition(':')
        tokens = value.split()
        if key == "ParamNames":
            header[key] = tokens
        elif key in ("MinParamVals", "MaxParamVals"):
            header[key] = [float(t) for t in tokens]
        elif key == "Dimension":
            header[key] = int(tokens[0])
    return header


def read_ipol_file(file_path) -> Tuple[Dict[str, Any], Dict[str, Ipol]]:
    """
    Reads an ipol file back.

    Returns:
        A tuple:
        1. the header as a dict (empty if the file has none);
        2. {bin identifier: Ipol}, in file order.
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        lines = [line.rstrip('\n') for line in f if line.strip()]

    header = {}
    if HEADER_SEPARATOR in lines:
        separator_idx = lines.index(HEADER_SEPARATOR)
        header = _parse_header(lines[:separator_idx])
        lines = lines[separator_idx + 1:]

    ipols = {}
    current_id = None
    for line in lines:
        if not line.startswith(" "):
            current_id = line.split()[0]
        elif line.strip().startswith(f"{VALUE_VAR}:"):
            if current_id is None:
                raise ValueError(f"Ipol line without a bin identifier in {file_path}: '{line}'")
            ipols[current_id] = Ipol.from_string(line.strip(), name=current_id)
    return header, ipols
