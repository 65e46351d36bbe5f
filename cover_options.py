# cover_options.py
# Option values shared by the generators and their command-line drivers
#
# Every option is a tagged variant with a fixed table of canonical short
# names (used when parsing) and descriptive names (used when printing).

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RegisteredOption(Enum):
    """
    Enum whose members carry a (short name, descriptive name) pair.

    The first member is the default, selected by the empty string.
    """

    def __new__(cls, short_name, long_name):
        obj = object.__new__(cls)
        obj._value_ = short_name
        obj.short_name = short_name
        obj.long_name = long_name
        return obj

    def __str__(self):
        return self.short_name

    @classmethod
    def default(cls):
        return next(iter(cls))

    @classmethod
    def read(cls, text: str) -> Optional["RegisteredOption"]:
        """
        Parse a short or descriptive name

        Returns:
            The member, the default for "", or None if nothing matches
        """
        if text == "":
            return cls.default()
        for member in cls:
            if text in (member.short_name, member.long_name):
                return member
        return None

    @classmethod
    def describe(cls) -> str:
        """Usage text, e.g. 'ct: prime|seco|secouep'"""
        names = "|".join(member.short_name for member in cls)
        return f"{cls.option_name}: {names}"


class ConstraintType(RegisteredOption):
    """Encoding of the exactly-one constraints of the exact-cover instance"""
    PRIME = ("prime", "primes")
    SECO = ("seco", "sequential-commander")
    SECOUEP = ("secouep", "seco-unit-propagation")


ConstraintType.option_name = "ct"


class GraphType(RegisteredOption):
    """Undirected graphs or directed graphs (digraphs)"""
    UNDIRECTED = ("und", "undirected")
    DIRECTED = ("dir", "directed")


GraphType.option_name = "gt"


def read_with_output_flag(option_cls, text):
    """
    Read an option value optionally prefixed by "+"

    A leading "+" requests file output instead of statistics only.

    Returns:
        tuple: (member or None, output requested)
    """
    output = text.startswith("+")
    rest = text[1:] if output else text
    return option_cls.read(rest), output


@dataclass(frozen=True)
class ProgramInfo:
    """Read-only banner data of a command-line program"""
    program: str
    version: str
    date: str
    author: str = "The coversat developers"
    url: str = ""
    licence: str = "GPL v3"

    def banner(self) -> str:
        lines = [
            f"program name:       {self.program}",
            f" version:           {self.version}",
            f" last change:       {self.date}",
            f" author:            {self.author}",
            f" licence:           {self.licence}",
        ]
        if self.url:
            lines.append(f" url:               {self.url}")
        return "\n".join(lines)

    def error_prefix(self) -> str:
        return f"ERROR[{self.program}]: "
