from pydantic import BaseModel


class ActivityResponse(BaseModel):
    """Streaks and totals."""
    current_streak: int
    max_streak: int
    total_solved: int
    last_active_date: str | None = None
    heatmap: dict[str, int] = {}


class HeatmapCell(BaseModel):
    date: str
    count: int


class HeatmapResponse(BaseModel):
    start: str
    end: str
    cells: list[HeatmapCell]
