"""
Application State (Data Model)
==============================
Everything a calculator session holds: the plotted functions, datasets,
viewport, display settings and animation settings.

All records are frozen dataclasses. Every update returns a new
``CalculatorState``, which makes undo/redo a matter of keeping old
snapshots around (see ``History``).

Classes:
    GridSettings, AxisSettings, ThemeSettings, AppSettings, AnimationSettings
    FunctionEntry, DataSet: One plotted function / dataset.
    CalculatorState: The main container.
    History: Bounded undo/redo buffer of snapshots.
    AnimationClock: Time source for animated expressions.
"""
import json
import logging
import re
import uuid
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType

from .classifier import detect_function_type
from .config import ANIMATION_DURATION, ANIMATION_FPS, HISTORY_LIMIT, TIME_VARIABLE
from .datasets import DataPoint
from .functions import format_function, parse_function, spec_from_dict, spec_to_dict
from .graph import Viewport

logger = logging.getLogger(__name__)

FUNCTION_COLORS = (
    '#3b82f6', '#ef4444', '#10b981', '#f59e0b',
    '#8b5cf6', '#ec4899', '#06b6d4', '#84cc16',
)

DEFAULT_SHORTCUTS = {
    'ctrl+z': 'undo',
    'ctrl+y': 'redo',
    'ctrl+s': 'save',
    'ctrl+n': 'new',
    'ctrl+o': 'open',
    'space': 'play-pause',
}

DATASET_KINDS = ('scatter', 'line', 'bar', 'histogram', 'box')


def new_id(prefix):
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


# ============================================================================
# SETTINGS
# ============================================================================

@dataclass(frozen=True)
class GridSettings:
    show_major_grid: bool = True
    show_minor_grid: bool = True
    major_grid_spacing: float = 1.0
    minor_grid_spacing: float = 0.2
    major_grid_color: str = '#e2e8f0'
    minor_grid_color: str = '#f1f5f9'
    major_grid_opacity: float = 0.8
    minor_grid_opacity: float = 0.4


@dataclass(frozen=True)
class AxisSettings:
    show_x_axis: bool = True
    show_y_axis: bool = True
    show_x_labels: bool = True
    show_y_labels: bool = True
    axis_color: str = '#475569'
    label_color: str = '#334155'
    font_size: int = 12
    tick_length: int = 5


@dataclass(frozen=True)
class ThemeSettings:
    mode: str = 'light'
    primary_color: str = '#3b82f6'
    background_color: str = '#ffffff'
    text_color: str = '#1f2937'
    accent_color: str = '#06b6d4'


@dataclass(frozen=True)
class AppSettings:
    theme: ThemeSettings = field(default_factory=ThemeSettings)
    language: str = 'en'
    precision: int = 6
    animation_fps: int = ANIMATION_FPS
    auto_save: bool = True
    shortcuts: MappingProxyType = field(default_factory=lambda: dict(DEFAULT_SHORTCUTS))

    def __post_init__(self):
        # Read-only copy so snapshots never share a mutable mapping
        object.__setattr__(self, 'shortcuts', MappingProxyType(dict(self.shortcuts)))


@dataclass(frozen=True)
class AnimationSettings:
    duration: float = ANIMATION_DURATION
    speed: float = 1.0
    loop: bool = True
    time_variable: str = TIME_VARIABLE


# Colors swapped by toggle_theme: (background, text, major grid, minor grid, axis, label)
LIGHT_PALETTE = ('#ffffff', '#1f2937', '#e2e8f0', '#f1f5f9', '#475569', '#334155')
DARK_PALETTE = ('#0f172a', '#f1f5f9', '#334155', '#1e293b', '#94a3b8', '#cbd5e1')


# ============================================================================
# ENTITIES
# ============================================================================

@dataclass(frozen=True)
class FunctionStyle:
    stroke_width: float = 2.0
    opacity: float = 1.0
    dash_array: str = None


@dataclass(frozen=True)
class FunctionEntry:
    """A plotted function"""
    id: str
    spec: object
    function_type: str
    color: str = FUNCTION_COLORS[0]
    visible: bool = True
    style: FunctionStyle = field(default_factory=FunctionStyle)

    @classmethod
    def from_text(cls, text, color=FUNCTION_COLORS[0], function_type=None):
        """Parse ``text`` into a new entry with a fresh id"""
        function_type = function_type or detect_function_type(text)
        return cls(new_id("func"), parse_function(text, function_type), function_type, color)

    @property
    def label(self):
        return format_function(self.spec)


@dataclass(frozen=True)
class DataSet:
    id: str
    name: str
    points: tuple = ()
    kind: str = 'scatter'
    color: str = FUNCTION_COLORS[0]
    visible: bool = True

    @classmethod
    def create(cls, name, points, kind='scatter', color=FUNCTION_COLORS[0]):
        if kind not in DATASET_KINDS:
            raise ValueError(f"Unknown dataset kind: {kind!r}")
        return cls(new_id("data"), name, tuple(points), kind, color)


def _replace_by_id(items, item_id, update):
    return tuple(update(item) if item.id == item_id else item for item in items)


# ============================================================================
# CALCULATOR STATE
# ============================================================================

@dataclass(frozen=True)
class CalculatorState:
    functions: tuple = ()
    datasets: tuple = ()
    viewport: Viewport = field(default_factory=Viewport)
    grid_settings: GridSettings = field(default_factory=GridSettings)
    axis_settings: AxisSettings = field(default_factory=AxisSettings)
    animation: AnimationSettings = field(default_factory=AnimationSettings)
    selected_tool: str = 'function'
    settings: AppSettings = field(default_factory=AppSettings)

    # --- Functions ---
    def add_function(self, entry):
        return replace(self, functions=self.functions + (entry,))

    def update_function(self, function_id, **changes):
        return replace(self, functions=_replace_by_id(
            self.functions, function_id, lambda f: replace(f, **changes)))

    def remove_function(self, function_id):
        return replace(self, functions=tuple(f for f in self.functions if f.id != function_id))

    def toggle_function_visibility(self, function_id):
        return replace(self, functions=_replace_by_id(
            self.functions, function_id, lambda f: replace(f, visible=not f.visible)))

    def duplicate_function(self, function_id):
        """Copy a function with a new id and the next palette color"""
        for entry in self.functions:
            if entry.id == function_id:
                color = FUNCTION_COLORS[len(self.functions) % len(FUNCTION_COLORS)]
                return self.add_function(replace(entry, id=new_id("func"), color=color))
        return self

    def function(self, function_id):
        return next((f for f in self.functions if f.id == function_id), None)

    # --- Datasets ---
    def add_dataset(self, dataset):
        return replace(self, datasets=self.datasets + (dataset,))

    def update_dataset(self, dataset_id, **changes):
        if 'points' in changes:
            changes['points'] = tuple(changes['points'])
        return replace(self, datasets=_replace_by_id(
            self.datasets, dataset_id, lambda d: replace(d, **changes)))

    def remove_dataset(self, dataset_id):
        return replace(self, datasets=tuple(d for d in self.datasets if d.id != dataset_id))

    # --- Viewport & display ---
    def with_viewport(self, viewport):
        return replace(self, viewport=viewport)

    def with_selected_tool(self, tool):
        return replace(self, selected_tool=tool)

    def fit_to_data(self):
        """Frame every dataset point with 10% padding; unchanged without data"""
        points = [p for dataset in self.datasets for p in dataset.points]
        if not points:
            return self
        return replace(self, viewport=self.viewport.fitted_to(points))

    def toggle_theme(self):
        mode = 'dark' if self.settings.theme.mode == 'light' else 'light'
        background, text, major, minor, axis, label = (
            DARK_PALETTE if mode == 'dark' else LIGHT_PALETTE)

        theme = replace(self.settings.theme, mode=mode,
                        background_color=background, text_color=text)
        return replace(
            self,
            settings=replace(self.settings, theme=theme),
            grid_settings=replace(self.grid_settings,
                                  major_grid_color=major, minor_grid_color=minor),
            axis_settings=replace(self.axis_settings, axis_color=axis, label_color=label),
        )

    def clear_all(self):
        """Drop functions and datasets and reset the viewport; settings stay"""
        return replace(self, functions=(), datasets=(), viewport=Viewport.default())


# ============================================================================
# HISTORY
# ============================================================================

class History:
    """
    Undo/redo over immutable snapshots.

    Pushing after an undo discards the redo branch. Only the newest
    ``limit`` snapshots are kept.
    """

    def __init__(self, limit=HISTORY_LIMIT):
        if limit < 1:
            raise ValueError(f"History limit must be positive, got {limit}")
        self.limit = limit
        self._snapshots = []
        self._index = -1

    def __len__(self):
        return len(self._snapshots)

    @property
    def current(self):
        return self._snapshots[self._index] if self._snapshots else None

    @property
    def can_undo(self):
        return self._index > 0

    @property
    def can_redo(self):
        return self._index < len(self._snapshots) - 1

    def push(self, snapshot):
        del self._snapshots[self._index + 1:]
        self._snapshots.append(snapshot)
        if len(self._snapshots) > self.limit:
            del self._snapshots[0]
        self._index = len(self._snapshots) - 1

    def undo(self):
        if not self.can_undo:
            return None
        self._index -= 1
        return self._snapshots[self._index]

    def redo(self):
        if not self.can_redo:
            return None
        self._index += 1
        return self._snapshots[self._index]


# ============================================================================
# ANIMATION
# ============================================================================

class AnimationClock:
    """
    Caller-driven animation time.

    Each ``tick`` advances ``current_time`` by speed / fps. At the end of the
    duration the clock wraps to 0 when looping, else stops at the end.
    """

    def __init__(self, settings=None, fps=ANIMATION_FPS):
        self.settings = settings or AnimationSettings()
        self.fps = fps
        self.current_time = 0.0
        self.is_playing = False

    def play(self):
        self.is_playing = True

    def pause(self):
        self.is_playing = False

    def stop(self):
        self.is_playing = False
        self.current_time = 0.0

    def seek(self, time):
        self.current_time = max(0.0, min(float(time), self.settings.duration))

    def tick(self):
        if not self.is_playing:
            return self.current_time

        new_time = self.current_time + self.settings.speed / self.fps
        if new_time >= self.settings.duration:
            if self.settings.loop:
                self.current_time = 0.0
            else:
                self.current_time = self.settings.duration
                self.is_playing = False
        else:
            self.current_time = new_time
        return self.current_time

    @property
    def variables(self):
        """Extra evaluation scope; empty unless playing"""
        if not self.is_playing:
            return {}
        return {self.settings.time_variable: self.current_time}


# ============================================================================
# SERIALIZATION
# ============================================================================

def _camel(name):
    head, *rest = name.split('_')
    return head + ''.join(part.title() for part in rest)


def _snake(name):
    return re.sub(r'(?<!^)(?=[A-Z])', '_', name).lower()


def _settings_to_dict(settings):
    data = {}
    for f in fields(settings):
        value = getattr(settings, f.name)
        data[_camel(f.name)] = dict(value) if isinstance(value, MappingProxyType) else value
    return data


def _settings_from_dict(cls, data):
    names = {f.name for f in fields(cls)}
    values = {}
    for key, value in (data or {}).items():
        name = _snake(key)
        if name in names:
            values[name] = value
        else:
            logger.debug("Ignoring unknown %s field %r", cls.__name__, key)
    return cls(**values)


def state_to_dict(state):
    """JSON-ready snapshot of ``state``"""
    settings = _settings_to_dict(state.settings)
    settings['theme'] = _settings_to_dict(state.settings.theme)

    return {
        'functions': [
            {
                'id': f.id,
                'spec': spec_to_dict(f.spec),
                'type': f.function_type,
                'color': f.color,
                'visible': f.visible,
                'style': _settings_to_dict(f.style),
            }
            for f in state.functions
        ],
        'datasets': [
            {
                'id': d.id,
                'name': d.name,
                'data': [{'x': p.x, 'y': p.y, 'label': p.label} for p in d.points],
                'type': d.kind,
                'color': d.color,
                'visible': d.visible,
            }
            for d in state.datasets
        ],
        'viewport': _settings_to_dict(state.viewport),
        'gridSettings': _settings_to_dict(state.grid_settings),
        'axisSettings': _settings_to_dict(state.axis_settings),
        'animation': _settings_to_dict(state.animation),
        'selectedTool': state.selected_tool,
        'settings': settings,
    }


def state_from_dict(data, regenerate_ids=False):
    """Rebuild a state; ``regenerate_ids`` gives every entity a fresh id"""
    functions = []
    for item in data.get('functions', []):
        spec = spec_from_dict(item['spec'])
        functions.append(FunctionEntry(
            id=new_id("func") if regenerate_ids else item['id'],
            spec=spec,
            function_type=item.get('type') or detect_function_type(format_function(spec)),
            color=item.get('color', FUNCTION_COLORS[0]),
            visible=item.get('visible', True),
            style=_settings_from_dict(FunctionStyle, item.get('style')),
        ))

    datasets = []
    for item in data.get('datasets', []):
        datasets.append(DataSet(
            id=new_id("data") if regenerate_ids else item['id'],
            name=item.get('name', ''),
            points=tuple(DataPoint(p['x'], p['y'], p.get('label')) for p in item.get('data', [])),
            kind=item.get('type', 'scatter'),
            color=item.get('color', FUNCTION_COLORS[0]),
            visible=item.get('visible', True),
        ))

    settings_data = dict(data.get('settings') or {})
    theme = _settings_from_dict(ThemeSettings, settings_data.pop('theme', None))
    settings = replace(_settings_from_dict(AppSettings, settings_data), theme=theme)

    return CalculatorState(
        functions=tuple(functions),
        datasets=tuple(datasets),
        viewport=_settings_from_dict(Viewport, data.get('viewport')),
        grid_settings=_settings_from_dict(GridSettings, data.get('gridSettings')),
        axis_settings=_settings_from_dict(AxisSettings, data.get('axisSettings')),
        animation=_settings_from_dict(AnimationSettings, data.get('animation')),
        selected_tool=data.get('selectedTool', 'function'),
        settings=settings,
    )


def export_state(state):
    return json.dumps(state_to_dict(state), indent=2)


def import_state(text):
    """Load an exported snapshot; entities get new ids"""
    state = state_from_dict(json.loads(text), regenerate_ids=True)
    logger.info("Imported %d functions and %d datasets",
                len(state.functions), len(state.datasets))
    return state
