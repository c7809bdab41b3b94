from dataclasses import dataclass


@dataclass(frozen=True)
class Button:
    text: str
    callback_data: str


@dataclass(frozen=True)
class Reply:
    text: str
    keyboard: tuple[tuple[Button, ...], ...] = ()
