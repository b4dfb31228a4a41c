from enum import Enum


class Direction(Enum):
    FRONT = "front"
    BACK = "back"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


# Draw order for random target selection
ALL_DIRECTIONS = (
    Direction.FRONT,
    Direction.BACK,
    Direction.LEFT,
    Direction.RIGHT,
    Direction.UP,
    Direction.DOWN,
)
