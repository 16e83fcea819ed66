"""Squares and the lower-case coordinate notation of the rules model.

Squares are plain integers, a1 = 0 through h8 = 63, counting along each
rank from the a-file::

    56 57 58 59 60 61 62 63   rank 8
    ...
     0  1  2  3  4  5  6  7   rank 1
"""

from __future__ import annotations

from typing import TypeAlias

Square: TypeAlias = int

FILE_NAMES = "abcdefgh"
RANK_NAMES = "12345678"


def make_square(file: int, rank: int) -> Square:
    return rank * 8 + file


def file_of(sq: Square) -> int:
    return sq % 8


def rank_of(sq: Square) -> int:
    return sq // 8


def is_valid_square(sq: int) -> bool:
    return 0 <= sq < 64


def square_name(sq: Square) -> str:
    """``0`` -> ``"a1"``, ``63`` -> ``"h8"``."""
    return f"{FILE_NAMES[file_of(sq)]}{RANK_NAMES[rank_of(sq)]}"


def parse_square(name: str) -> Square:
    """``"e4"`` -> ``28``.  Upper-case names are rejected."""
    file = FILE_NAMES.find(name[:1])
    rank = RANK_NAMES.find(name[1:2])
    if len(name) != 2 or file < 0 or rank < 0:
        raise ValueError(f"Invalid square name: {name!r}")
    return make_square(file, rank)


def light_square(sq: Square) -> bool:
    return (file_of(sq) + rank_of(sq)) % 2 == 1


A1, B1, C1, D1, E1, F1, G1, H1 = range(0, 8)
A2, B2, C2, D2, E2, F2, G2, H2 = range(8, 16)
A3, B3, C3, D3, E3, F3, G3, H3 = range(16, 24)
A4, B4, C4, D4, E4, F4, G4, H4 = range(24, 32)
A5, B5, C5, D5, E5, F5, G5, H5 = range(32, 40)
A6, B6, C6, D6, E6, F6, G6, H6 = range(40, 48)
A7, B7, C7, D7, E7, F7, G7, H7 = range(48, 56)
A8, B8, C8, D8, E8, F8, G8, H8 = range(56, 64)
