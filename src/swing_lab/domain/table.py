from dataclasses import dataclass


@dataclass(frozen=True)
class RawTable:
    headers: tuple[str, ...]
    rows: tuple[dict[str, str], ...]

    def __len__(self) -> int:
        return len(self.rows)
