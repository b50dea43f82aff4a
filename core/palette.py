"""Color palettes handed out to new projects and tags."""

from typing import List

PROJECT_COLORS: List[str] = [
    "#E06C75",
    "#98C379",
    "#E5C07B",
    "#61AFEF",
    "#C678DD",
    "#56B6C2",
    "#D19A66",
    "#BE5046",
    "#7EC699",
    "#E6B450",
    "#5C99D6",
    "#B57EDC",
]

TAG_COLORS: List[str] = [
    "#FF6B9D",
    "#9ECE6A",
    "#7DCFFF",
    "#BB9AF7",
    "#F7768E",
    "#73DACA",
    "#FF9E64",
    "#E0AF68",
    "#2AC3DE",
    "#B4F9F8",
    "#C0CAF5",
    "#A9B1D6",
]


def project_color(index: int) -> str:
    return PROJECT_COLORS[index % len(PROJECT_COLORS)]


def tag_color(index: int) -> str:
    return TAG_COLORS[index % len(TAG_COLORS)]
