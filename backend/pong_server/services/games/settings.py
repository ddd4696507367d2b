from dataclasses import dataclass, fields


@dataclass(frozen=True)
class GameSettings:
    """Game constants, frozen when the app is created."""
    canvas_width: int = 800
    canvas_height: int = 400
    paddle_width: int = 10
    paddle_height: int = 80
    paddle_offset: int = 20
    ball_radius: int = 8
    ball_speed: int = 5
    paddle_speed: int = 6
    winning_score: int = 5
    frame_rate: int = 60

    @property
    def tick_interval(self) -> float:
        return 1.0 / self.frame_rate

    @classmethod
    def from_config(cls, config) -> 'GameSettings':
        """Build settings from a Flask config mapping (upper-case keys)."""
        values = {}
        for f in fields(cls):
            key = f.name.upper()
            if key in config and config[key] is not None:
                values[f.name] = int(config[key])
        return cls(**values)
