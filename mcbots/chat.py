"""Chat text components: styling, translation, ANSI rendering and JSON encoding."""

from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Mapping, Optional

# Chat types
CHAT = 0
SYSTEM = 1
GAME_INFO = 2
SAY_COMMAND = 3
MSG_COMMAND = 4
TEAM_MSG_COMMAND = 5
EMOTE_COMMAND = 6
TELLRAW_COMMAND = 7

# Colors
BLACK = "black"
DARK_BLUE = "dark_blue"
DARK_GREEN = "dark_green"
DARK_AQUA = "dark_aqua"
DARK_RED = "dark_red"
DARK_PURPLE = "dark_purple"
GOLD = "gold"
GRAY = "gray"
DARK_GRAY = "dark_gray"
BLUE = "blue"
GREEN = "green"
AQUA = "aqua"
RED = "red"
LIGHT_PURPLE = "light_purple"
YELLOW = "yellow"
WHITE = "white"

_FMT_CODES = {
    "0": "30",
    "1": "34",
    "2": "32",
    "3": "36",
    "4": "31",
    "5": "35",
    "6": "33",
    "7": "37",
    "8": "90",
    "9": "94",
    "a": "92",
    "b": "96",
    "c": "91",
    "d": "95",
    "e": "93",
    "f": "97",
    "l": "1",
    "m": "9",
    "n": "4",
    "o": "3",
    "r": "0",
}

_COLOR_CODES = {
    BLACK: "30",
    DARK_BLUE: "34",
    DARK_GREEN: "32",
    DARK_AQUA: "36",
    DARK_RED: "31",
    DARK_PURPLE: "35",
    GOLD: "33",
    GRAY: "37",
    DARK_GRAY: "90",
    BLUE: "94",
    GREEN: "92",
    AQUA: "96",
    RED: "91",
    LIGHT_PURPLE: "95",
    YELLOW: "93",
    WHITE: "97",
}

_FMT_PATTERN = re.compile(r"§[0-9A-FK-OR]", re.IGNORECASE)
_VERB_PATTERN = re.compile(r"%(?:(\d+)\$)?([a-z%])")
_RESET = "\033[0m"


class _Language:
    """Holds the translation table used for rendering."""

    def __init__(self) -> None:
        self.table: Mapping[str, str] = {}

    def lookup(self, key: str) -> str:
        return self.table.get(key, "")


_LANGUAGE = _Language()


def set_language(translations: Mapping[str, str]) -> None:
    """Set the translation table used when rendering translated messages."""
    _LANGUAGE.table = translations


def trans_ctrl_seq(value: str, ansi: bool) -> tuple[str, bool]:
    """Turn § formatting codes into ANSI sequences, or strip them.

    Returns the new string and whether any ANSI sequence was inserted.
    """
    changed = False

    def substitute(match: re.Match) -> str:
        nonlocal changed
        code = _FMT_CODES.get(match.group(0)[1])
        if code is None:
            return match.group(0)
        if ansi:
            changed = True
            return f"\033[{code}m"
        return ""

    return _FMT_PATTERN.sub(substitute, value), changed


def _format(template: str, args: list) -> str:
    position = 0

    def substitute(match: re.Match) -> str:
        nonlocal position
        index, verb = match.groups()
        if verb == "%":
            return "%"
        if index is not None:
            slot = int(index) - 1
        else:
            slot = position
            position += 1
        if 0 <= slot < len(args):
            return str(args[slot])
        return f"%!{verb}(MISSING)"

    return _VERB_PATTERN.sub(substitute, template)


@dataclass(frozen=True)
class ClickEvent:
    """What happens when a component is clicked."""

    action: str
    value: str


def open_url(url: str) -> ClickEvent:
    return ClickEvent("open_url", url)


def run_command(cmd: str) -> ClickEvent:
    return ClickEvent("run_command", cmd)


def suggest_command(cmd: str) -> ClickEvent:
    return ClickEvent("suggest_command", cmd)


def change_page(page: int) -> ClickEvent:
    return ClickEvent("change_page", str(page))


def copy_to_clipboard(text: str) -> ClickEvent:
    return ClickEvent("copy_to_clipboard", text)


def _expect_dict(obj: Any, what: str) -> dict:
    if not isinstance(obj, dict):
        raise ValueError(f"{what} must be an object, got {type(obj).__name__}")
    return obj


@dataclass(frozen=True)
class Message:
    """A chat text component. Methods that change it return a new message."""

    text: str = ""
    bold: bool = False
    italic: bool = False
    underlined: bool = False
    strikethrough: bool = False
    obfuscated: bool = False
    font: str = ""
    color: str = ""
    insertion: str = ""
    click_event: Optional[ClickEvent] = None
    hover_event: Optional["HoverEvent"] = None
    translate: str = ""
    with_args: tuple = ()
    extra: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "with_args", tuple(self.with_args))
        object.__setattr__(self, "extra", tuple(self.extra))

    def append(self, *args: "Message") -> "Message":
        """Return a copy with ``args`` added to the end of ``extra``."""
        return replace(self, extra=(*self.extra, *args))

    def set_color(self, color: str) -> "Message":
        return replace(self, color=color)

    def clear_string(self) -> str:
        """Plain text of the message, without any formatting."""
        parts = [trans_ctrl_seq(self.text, False)[0]]
        if self.translate:
            args = [a.clear_string() if isinstance(a, Message) else a for a in self.with_args]
            parts.append(_format(_LANGUAGE.lookup(self.translate), args))
        parts.extend(m.clear_string() for m in self.extra)
        return "".join(parts)

    def __str__(self) -> str:
        codes = []
        if self.bold:
            codes.append("1")
        if self.italic:
            codes.append("3")
        if self.underlined:
            codes.append("4")
        if self.strikethrough:
            codes.append("9")
        if self.color:
            codes.append(_COLOR_CODES.get(self.color, ""))

        parts = []
        if codes:
            parts.append("\033[" + ";".join(codes) + "m")
        body, changed = trans_ctrl_seq(self.text, True)
        parts.append(body)
        if self.translate:
            parts.append(_format(_LANGUAGE.lookup(self.translate), list(self.with_args)))
        parts.extend(str(m) for m in self.extra)
        if codes or changed:
            parts.append(_RESET)
        return "".join(parts)

    def to_dict(self) -> dict:
        """JSON-ready form; ``text`` is left out only for translated messages."""
        out: dict = {}
        if self.text or not self.translate:
            out["text"] = self.text
        for key, value in (
            ("bold", self.bold),
            ("italic", self.italic),
            ("underlined", self.underlined),
            ("strikethrough", self.strikethrough),
            ("obfuscated", self.obfuscated),
            ("font", self.font),
            ("color", self.color),
            ("insertion", self.insertion),
        ):
            if value:
                out[key] = value
        if self.click_event is not None:
            out["clickEvent"] = asdict(self.click_event)
        if self.hover_event is not None:
            out["hoverEvent"] = {
                "action": self.hover_event.action,
                "contents": self.hover_event.contents,
                "value": self.hover_event.value.to_dict(),
            }
        if self.translate:
            out["translate"] = self.translate
        if self.with_args:
            out["with"] = [a.to_dict() if isinstance(a, Message) else a for a in self.with_args]
        if self.extra:
            out["extra"] = [m.to_dict() for m in self.extra]
        return out

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str | bytes) -> "Message":
        """Decode a JSON text component: a string, an object or an array."""
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        raw = raw.strip()
        if not raw:
            raise ValueError("empty chat message")
        if raw[0] not in '"{[':
            raise ValueError(f"unknown chat message type: '{raw[0]}'")
        return cls.from_obj(json.loads(raw))

    @classmethod
    def from_obj(cls, obj: Any) -> "Message":
        """Build a message from decoded JSON data."""
        if isinstance(obj, str):
            return cls(text=obj)
        if isinstance(obj, list):
            return cls(extra=tuple(cls.from_obj(item) for item in obj))
        obj = _expect_dict(obj, "chat message")

        click = obj.get("clickEvent")
        click_event = None
        if click is not None:
            click = _expect_dict(click, "clickEvent")
            click_event = ClickEvent(str(click.get("action", "")), str(click.get("value", "")))

        hover = obj.get("hoverEvent")
        hover_event = None
        if hover is not None:
            hover = _expect_dict(hover, "hoverEvent")
            value = hover.get("value")
            hover_event = HoverEvent(
                action=str(hover.get("action", "")),
                contents=hover.get("contents"),
                value=cls.from_obj(value) if value is not None else cls(),
            )

        with_args = obj.get("with") or []
        extra = obj.get("extra") or []
        if not isinstance(with_args, list) or not isinstance(extra, list):
            raise ValueError("'with' and 'extra' must be arrays")

        return cls(
            text=str(obj.get("text", "")),
            bold=bool(obj.get("bold", False)),
            italic=bool(obj.get("italic", False)),
            underlined=bool(obj.get("underlined", False)),
            strikethrough=bool(obj.get("strikethrough", False)),
            obfuscated=bool(obj.get("obfuscated", False)),
            font=str(obj.get("font", "")),
            color=str(obj.get("color", "")),
            insertion=str(obj.get("insertion", "")),
            click_event=click_event,
            hover_event=hover_event,
            translate=str(obj.get("translate", "")),
            with_args=tuple(cls.from_obj(a) for a in with_args),
            extra=tuple(cls.from_obj(m) for m in extra),
        )


@dataclass(frozen=True)
class HoverEvent:
    """What is shown when a component is hovered over."""

    action: str
    contents: Any = None
    value: Message = field(default_factory=Message)


def show_text(message: Message) -> HoverEvent:
    return HoverEvent(action="show_text", value=message)


def show_item(item: str) -> HoverEvent:
    """Show an item described in stringified NBT."""
    return HoverEvent(action="show_item", value=Message(text=item))


def show_entity(entity: str) -> HoverEvent:
    """Show an entity described in stringified NBT."""
    return HoverEvent(action="show_entity", value=Message(text=entity))


def text(value: str) -> Message:
    return Message(text=value)


def translate_msg(key: str, *args: Message) -> Message:
    return Message(translate=key, with_args=args)


@dataclass(frozen=True)
class Decoration:
    """How a chat type wraps its parameters into a translated message."""

    translation_key: str
    parameters: tuple = ()
    bold: bool = False
    italic: bool = False
    underlined: bool = False
    strikethrough: bool = False
    obfuscated: bool = False
    color: str = ""
    insertion: str = ""
    font: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", tuple(self.parameters))


@dataclass(frozen=True)
class ChatType:
    """A bound chat type: its id and the sender and optional target names."""

    id: int
    sender_name: Message
    target_name: Optional[Message] = None

    def decorate(self, content: Message, decoration: Decoration) -> Message:
        """Wrap ``content`` in the decoration's translated, styled message."""
        args = []
        for parameter in decoration.parameters:
            if parameter == "sender":
                args.append(self.sender_name)
            elif parameter == "target":
                if self.target_name is None:
                    raise ValueError("chat type has no target name")
                args.append(self.target_name)
            elif parameter == "content":
                args.append(content)
            else:
                args.append(text("<nil>"))
        return Message(
            translate=decoration.translation_key,
            with_args=tuple(args),
            bold=decoration.bold,
            italic=decoration.italic,
            underlined=decoration.underlined,
            strikethrough=decoration.strikethrough,
            obfuscated=decoration.obfuscated,
            font=decoration.font,
            color=decoration.color,
            insertion=decoration.insertion,
        )