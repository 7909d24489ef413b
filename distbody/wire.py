from __future__ import annotations
import numpy as np

from .body_set import BodySet, ROW_WIDTH
from .errors import ProtocolMismatch, SerializationError

"""
This module implements the byte layout used between ranks. A force array travels as a flat sequence of little-endian float64 (fx, fy) pairs, one pair per body in index order, with no header: the receiver already knows how many bodies it holds and checks the decoded length against that. Body state for the initial replication uses the same scheme with five float64 values per body (mass, x, y, vx, vy). Decoding distinguishes a payload that cannot be a sequence of records at all (SerializationError) from a well-formed payload of the wrong length (ProtocolMismatch).

"""

WIRE_DTYPE = np.dtype("<f8")
FORCE_WIDTH = 2


def _encode(arr: np.ndarray, width: int) -> bytes:
	arr = np.asarray(arr, dtype=np.float64)
	if arr.ndim != 2 or arr.shape[1] != width:
		raise SerializationError(f"expected an (n, {width}) array, got shape {arr.shape}")
	return np.ascontiguousarray(arr, dtype=WIRE_DTYPE).tobytes()


def _decode(payload: bytes, width: int, expected_len: int, what: str) -> np.ndarray:
	if not isinstance(payload, (bytes, bytearray, memoryview)):
		raise SerializationError(f"{what} payload must be bytes, got {type(payload).__name__}")
	record = width * WIRE_DTYPE.itemsize
	nbytes = memoryview(payload).nbytes
	if nbytes % record != 0:
		raise SerializationError(
			f"{what} payload of {nbytes} bytes is not a whole number of {record}-byte records"
		)
	count = nbytes // record
	if count != expected_len:
		raise ProtocolMismatch(expected_len, count, what)
	if count == 0:
		return np.zeros((0, width), dtype=np.float64)
	arr = np.frombuffer(payload, dtype=WIRE_DTYPE).reshape(count, width)
	return arr.astype(np.float64, copy=True)


def encode_forces(forces: np.ndarray) -> bytes:
	return _encode(forces, FORCE_WIDTH)


def decode_forces(payload: bytes, expected_len: int) -> np.ndarray:
	return _decode(payload, FORCE_WIDTH, expected_len, "force array")


def encode_state(bodies: BodySet) -> bytes:
	return _encode(bodies.to_rows(), ROW_WIDTH)


def decode_state(payload: bytes, expected_len: int) -> BodySet:
	rows = _decode(payload, ROW_WIDTH, expected_len, "body set")
	return BodySet.from_rows(rows)


__all__ = [
	"WIRE_DTYPE",
	"encode_forces",
	"decode_forces",
	"encode_state",
	"decode_state",
]
