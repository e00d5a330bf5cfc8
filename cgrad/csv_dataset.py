"""Datasets read from CSV files whose first column is the label."""

from __future__ import annotations

import math
import re
from typing import Iterator

import numpy as np

from cgrad.dtypes import DType
from cgrad.errors import DatasetError
from cgrad.indexes import IndexesBatch
from cgrad.tensor import DATASET_CSV_MAX_LINE_LENGTH, Tensor

_STANDARD_SCALE_EPS = 10e-8

_NUMBER_PREFIX = re.compile(
    r"\s*[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


def _parse_field(field: str) -> float:
    """The leading number of ``field``, or 0.0 if it has none."""
    match = _NUMBER_PREFIX.match(field)
    if not match:
        return 0.0
    return float(match.group(0).strip())


def _split_fields(line: str) -> list[str]:
    """Comma-separated fields of ``line``; empty fields are skipped."""
    return [field for field in line.split(",") if field]


def _lines(text: str) -> Iterator[str]:
    """Lines of ``text``, each keeping its trailing newline if it has one."""
    pieces = text.split("\n")
    for piece in pieces[:-1]:
        yield piece + "\n"
    if pieces[-1]:
        yield pieces[-1]


def _check_line_length(line: str) -> None:
    if len(line) > DATASET_CSV_MAX_LINE_LENGTH - 1:
        raise DatasetError(
            f"CSV line longer than {DATASET_CSV_MAX_LINE_LENGTH - 1} characters"
        )


class CsvDataset:
    """A table of floats; column 0 is the label, the others are features."""

    def __init__(self, data):
        array = np.array(data, dtype=np.float64)
        if array.ndim != 2:
            raise DatasetError(f"dataset data must be 2-d, got {array.ndim} dimensions")
        self.data = array

    @property
    def rows(self) -> int:
        return int(self.data.shape[0])

    @property
    def cols(self) -> int:
        return int(self.data.shape[1])

    @classmethod
    def load(cls, path) -> CsvDataset:
        """Read the CSV file at ``path``, skipping its header line."""
        try:
            with open(path, "r", encoding="latin-1", newline="") as handle:
                text = handle.read()
        except OSError as exc:
            raise DatasetError(f"cannot read {path}: {exc}") from exc

        lines = _lines(text)
        header = next(lines, None)
        if header is None:
            raise DatasetError(f"{path} has no header line")
        _check_line_length(header)
        cols = len(_split_fields(header))

        rows = max(text.count("\n") - 1, 0)

        records = []
        for line in lines:
            _check_line_length(line)
            fields = _split_fields(line)
            if len(fields) != cols:
                raise DatasetError(
                    f"row {len(records) + 1} has {len(fields)} fields, expected {cols}"
                )
            records.append([_parse_field(field) for field in fields])

        if len(records) != rows:
            raise DatasetError(f"read {len(records)} rows, expected {rows}")

        return cls(np.array(records, dtype=np.float64).reshape(rows, cols))

    def sample_batch(self, batch: IndexesBatch, dtype, env) -> tuple[Tensor, Tensor]:
        """Inputs ``(n, cols-1)`` and a target column ``(n, 1)`` for the batch rows.

        Only floating dtypes are filled; other dtypes give zero tensors.
        """
        if self.data is None:
            raise DatasetError("dataset has no data")
        if batch is None:
            raise TypeError("indexes batch must not be None")
        if self.cols < 1:
            raise DatasetError("dataset has no label column")
        dtype = DType(dtype)

        indexes = list(batch.indexes)
        bad = [i for i in indexes if not 0 <= i < self.rows]
        if bad:
            raise IndexError(f"row index {bad[0]} out of range for {self.rows} rows")

        inputs = Tensor.zeros((len(indexes), self.cols - 1), dtype)
        targets = Tensor.zeros((len(indexes), 1), dtype)

        if dtype.is_floating and indexes:
            selected = self.data[indexes]
            inputs.data[...] = selected[:, 1:]
            targets.data[:, 0] = selected[:, 0]

        return inputs, targets

    def standard_scale(self) -> None:
        """Scale every feature column to zero mean and unit variance in place."""
        if self.data is None:
            raise DatasetError("dataset has no data")
        if self.rows == 0:
            return
        features = self.data[:, 1:]
        mean = features.sum(axis=0) / self.rows
        centred = features - mean
        std_dev = np.sqrt((centred * centred).sum(axis=0) / self.rows)
        self.data[:, 1:] = centred / (std_dev + _STANDARD_SCALE_EPS)

    def __repr__(self) -> str:
        return f"CsvDataset(rows={self.rows}, cols={self.cols})"


__all__ = ["CsvDataset"]

# math is kept for callers that compare scaled values with isclose.
_ = math