"""Template formatter for building escaped SQL from printf-style templates

prepare() accepts a subset of printf placeholders:

- Numbered placeholders, e.g. %1$s
- Sign specifier, e.g. %+d
- Padding, including custom padding characters, e.g. %05d, %'#5s
- Alignment, e.g. %-5s, %05-s
- Precision, e.g. %.2f
- Types s (string), d (integer), f/F (float), i (identifier)

String arguments are escaped and quoted, identifiers are backtick-quoted,
numbers are embedded as-is. Every '%' left in the output is replaced with an
opaque token (see sqlclaws.utils.escape.placeholder_escape) so escaped data
cannot turn into a placeholder in a later formatting pass.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from sqlclaws.utils.escape import add_placeholder_escape, real_escape
from sqlclaws.utils.types import is_scalar, to_float, to_int, to_string

logger = logging.getLogger(__name__)

ALLOWED_FORMAT = r"(?:[1-9][0-9]*[$])?[-+0-9]*(?: |0|'.)?[-+0-9]*(?:\.[0-9]+)?"

_UNRECOGNIZED_PERCENT = re.compile(rf"%(?:%|$|(?!(?:{ALLOWED_FORMAT})?[sdfFi]))")
_PLACEHOLDER_SPLIT = re.compile(rf"(^|[^%]|(?:%%)+)(%(?:{ALLOWED_FORMAT})?[sdfFi])")
_ARGNUM = re.compile(r"([1-9][0-9]*)\$")
_DIGITS = re.compile(r"[0-9]+")


class PrepareError(ValueError):
    """Raised by prepare_strict() when a template or its arguments are rejected"""


@dataclass(frozen=True)
class Placeholder:
    """One placeholder found in a template, e.g. '%1$05.2F'"""

    text: str
    argnum: Optional[int]
    modifiers: str
    conversion: str

    @property
    def format(self) -> str:
        """Everything between '%' and the conversion char"""
        return self.text[1:-1]

    def arg_index(self, position: int) -> int:
        """0-based argument index, given the placeholder's position in the template"""
        if self.argnum is not None:
            return self.argnum - 1
        return position

    @classmethod
    def parse(cls, text: str) -> Placeholder:
        body = text[1:-1]
        match = _ARGNUM.match(body)
        if match:
            return cls(text, int(match.group(1)), body[match.end():], text[-1])
        return cls(text, None, body, text[-1])


def find_placeholders(query: str) -> list[Placeholder]:
    """List the placeholders prepare() would recognize in a template"""
    query = _UNRECOGNIZED_PERCENT.sub("%%", str(query))
    split_query = _PLACEHOLDER_SPLIT.split(query)
    return [Placeholder.parse(split_query[i]) for i in range(2, len(split_query), 3)]


def prepare(query: str, *values: Any) -> str:
    """Prepare an escaped SQL fragment from a template and values

    Values are passed either as separate arguments or as a single list.
    Returns an empty string if the template and values don't fit together:
    a placeholder count that doesn't match the values, or one argument used
    both as an identifier (%i) and as a string (%s).

    Example:
        >>> prepare("SELECT * FROM %i WHERE id = %d AND name = %s", "users", 5, "O'Reilly")
        "SELECT * FROM `users` WHERE id = 5 AND name = 'O\\\\'Reilly'"
        >>> prepare("%s %s", ["only one"])
        ''
    """
    try:
        return _prepare(query, values)
    except PrepareError as e:
        logger.debug("Rejected SQL template %r: %s", query, e)
        return ""


def prepare_strict(query: str, *values: Any) -> str:
    """Same as prepare(), but raises PrepareError instead of returning ''"""
    return _prepare(query, values)


def _prepare(query: str, values: Sequence[Any]) -> str:
    query = str(query)

    # Quotes around a bare %s are re-added uniformly below
    query = query.replace("'%s'", "%s")
    query = query.replace('"%s"', "%s")

    query = _UNRECOGNIZED_PERCENT.sub("%%", query)

    # One chunk before the first placeholder, then 3 chunks per placeholder:
    # leading character(s), the placeholder itself, the text up to the next one
    split_query = _PLACEHOLDER_SPLIT.split(query)
    split_count = len(split_query)
    placeholder_count = (split_count - 1) // 3

    passed_as_array = len(values) == 1 and isinstance(values[0], (list, tuple))
    args = list(values[0]) if passed_as_array else list(values)

    new_query = []
    identifier_args: list[int] = []
    string_args: list[int] = []
    key = 2
    arg_id = 0

    while key < split_count:
        placeholder = Placeholder.parse(split_query[key])
        fmt = placeholder.format
        conversion = placeholder.conversion
        leading = split_query[key - 1]
        rewritten = placeholder.text

        escaped_literal = False
        if conversion == "f" and leading.endswith("%"):
            # An odd run of '%' before it escapes its '%': literal text, not a placeholder
            preceding = split_query[key - 2] + leading
            escaped_literal = (len(preceding) - len(preceding.rstrip("%"))) % 2 == 1

        if escaped_literal:
            placeholder_count -= 1
        else:
            if conversion == "f":
                conversion = "F"
                rewritten = "%" + fmt + "F"

            if conversion == "i":
                rewritten = "`%" + fmt + "s`"
                identifier_args.append(placeholder.arg_index(arg_id))
            elif conversion not in ("d", "F"):
                string_args.append(placeholder.arg_index(arg_id))

                # Numbered or formatted strings stay unquoted, as does a %s
                # directly after a '%', e.g. LIKE '%%%s%%'
                if fmt == "" and not leading.endswith("%"):
                    rewritten = "'%s'"

        new_query.append(split_query[key - 2] + leading + rewritten)
        key += 3
        if not escaped_literal:
            arg_id += 1

    query = "".join(new_query) + split_query[key - 2]

    if set(identifier_args) & set(string_args):
        raise PrepareError("an argument is used both as an identifier and as a string")

    args_count = len(args)

    if args_count != placeholder_count:
        if placeholder_count == 1 and passed_as_array:
            raise PrepareError(
                f"1 placeholder but {args_count} values were passed as a list"
            )

        if args_count < placeholder_count:
            max_numbered = max(
                (Placeholder.parse(split_query[i]).argnum or 0
                 for i in range(2, split_count, 3)),
                default=0,
            )
            if not max_numbered or args_count < max_numbered:
                raise PrepareError(
                    f"{placeholder_count} placeholders but only {args_count} values"
                )

    escaped = []
    for index, value in enumerate(args):
        if index in identifier_args:
            escaped.append(to_string(value).replace("`", "``"))
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            escaped.append(value)
        else:
            if value is not None and not is_scalar(value):
                value = ""
            escaped.append(real_escape(value))

    return add_placeholder_escape(sprintf(query, escaped))


def sprintf(template: str, args: Sequence[Any]) -> str:
    """Render a printf-style template

    Supports '%%', numbered arguments ('%2$s'), the flags '-', '+', ' ', '0'
    and "'c" (custom pad character), width, precision and the conversions
    s, d, f and F.

    Raises:
        PrepareError: On a missing argument or an unknown conversion
    """
    out = []
    length = len(template)
    next_arg = 0
    i = 0

    while i < length:
        percent = template.find("%", i)
        if percent == -1:
            out.append(template[i:])
            break

        out.append(template[i:percent])
        i = percent + 1

        if i >= length:
            raise PrepareError("missing conversion at end of template")

        if template[i] == "%":
            out.append("%")
            i += 1
            continue

        argnum = None
        match = _ARGNUM.match(template, i)
        if match:
            argnum = int(match.group(1)) - 1
            i = match.end()

        left = False
        plus = False
        pad = " "
        width = None

        while i < length:
            char = template[i]
            if char == "-":
                left = True
            elif char == "+":
                plus = True
            elif char == " ":
                pad = " "
            elif char == "'" and i + 1 < length:
                pad = template[i + 1]
                i += 1
            elif char == "0" and width is None:
                pad = "0"
            elif char.isascii() and char.isdigit():
                digits = _DIGITS.match(template, i)
                width = int(digits.group(0))
                i = digits.end()
                continue
            else:
                break
            i += 1

        precision = None
        if i < length and template[i] == ".":
            digits = _DIGITS.match(template, i + 1)
            if digits:
                precision = int(digits.group(0))
                i = digits.end()
            else:
                precision = 0
                i += 1

        if i >= length:
            raise PrepareError("missing conversion at end of template")

        conversion = template[i]
        i += 1

        if argnum is None:
            argnum = next_arg
            next_arg += 1

        if argnum >= len(args):
            raise PrepareError(f"missing argument {argnum + 1} for '%{conversion}'")

        out.append(_convert(args[argnum], conversion, width, precision, pad, left, plus))

    return "".join(out)


def _convert(
    value: Any,
    conversion: str,
    width: Optional[int],
    precision: Optional[int],
    pad: str,
    left: bool,
    plus: bool,
) -> str:
    sign = ""

    if conversion == "s":
        body = to_string(value)
        if precision is not None:
            body = body[:precision]
    elif conversion == "d":
        number = to_int(value)
        body = str(abs(number))
        sign = "-" if number < 0 else ("+" if plus else "")
    elif conversion in ("F", "f"):
        number = to_float(value)
        body = f"{abs(number):.{6 if precision is None else precision}f}"
        sign = "-" if number < 0 else ("+" if plus else "")
    else:
        raise PrepareError(f"unknown conversion '%{conversion}'")

    filled = sign + body
    if width is None or len(filled) >= width:
        return filled

    fill = width - len(filled)
    if left:
        return filled + pad * fill
    if pad == "0" and sign:
        return sign + "0" * fill + body
    return pad * fill + filled
