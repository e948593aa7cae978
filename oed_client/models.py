"""Shapes of the JSON bodies exchanged with the OED backend.

These are typing contracts only. Responses are returned exactly as the
backend sent them, without checking that they match.
"""

from __future__ import annotations

from typing import TypedDict


class NamedIDItem(TypedDict):
    id: int
    name: str


class GroupChildren(TypedDict):
    meters: list[int]
    groups: list[int]


class LineReading(TypedDict):
    reading: float
    startTimestamp: int
    endTimestamp: int


class BarReading(TypedDict):
    reading: float
    startTimestamp: int
    endTimestamp: int


# Keyed by meter or group id; JSON object keys arrive as strings
LineReadings = dict[str, list[LineReading]]
BarReadings = dict[str, list[BarReading]]


class GroupData(TypedDict):
    name: str
    childMeters: list[int]
    childGroups: list[int]


class GroupEditData(GroupData):
    id: int


class PreferenceRequestItem(TypedDict):
    displayTitle: str
    defaultChartToRender: str
    defaultBarStacking: bool


class LoginResponse(TypedDict):
    token: str


class VerificationResponse(TypedDict):
    success: bool
