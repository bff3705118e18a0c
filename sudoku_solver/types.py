from typing import Optional


Grid = list[list[Optional[int]]]
SolvedGrid = list[list[int]]
Position = tuple[int, int]
TraceLog = list[str]
TraceStep = dict[str, object]
ProgressState = dict[str, int]
Conflict = tuple[str, int, int]
