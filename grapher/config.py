# --- Engine Defaults ---
DEFAULT_VARIABLES = ("x",)
SURFACE_VARIABLES = ("x", "y")

# Central-difference step used by derivative()
DEFAULT_STEP = 1e-6

# Initial operand-stack slots per Evaluator; grown once if a deeper Program shows up
STACK_CAPACITY = 64

# --- Sampling Defaults ---
DEFAULT_X_RANGE = (-10.0, 10.0)
DEFAULT_Y_RANGE = (-10.0, 10.0)
DEFAULT_COLUMNS = 1024
DEFAULT_RESOLUTION = 50


class GrapherConfig:

    def __init__(
        self,
        variables: tuple = DEFAULT_VARIABLES,
        x_range: tuple = DEFAULT_X_RANGE,
        y_range: tuple = DEFAULT_Y_RANGE,
        columns: int = DEFAULT_COLUMNS,
        resolution: int = DEFAULT_RESOLUTION,
        step: float = DEFAULT_STEP,
        stack_capacity: int = STACK_CAPACITY,
    ):
        self.variables = tuple(variables)
        self.x_range = tuple(x_range)
        self.y_range = tuple(y_range)
        self.columns = columns
        self.resolution = resolution
        self.step = step
        self.stack_capacity = stack_capacity

    @property
    def is_surface(self):
        return len(self.variables) == 2

    def sample_params(self):
        """Keyword arguments for one background sampling pass."""
        if self.is_surface:
            return {'x_range': self.x_range, 'y_range': self.y_range, 'resolution': self.resolution}
        return {'x_range': self.x_range, 'columns': self.columns}

    def __repr__(self):
        return (f"GrapherConfig(variables={self.variables}, x_range={self.x_range}, y_range={self.y_range}, "
                f"columns={self.columns}, resolution={self.resolution}, step={self.step}, "
                f"stack_capacity={self.stack_capacity})")
