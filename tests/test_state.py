import json
from dataclasses import replace

import pytest

from graphyy.datasets import DataPoint
from graphyy.functions import Cartesian, Implicit, Parametric, Piecewise, Polar
from graphyy.graph import Viewport
from graphyy.state import (
    FUNCTION_COLORS,
    AnimationClock,
    AnimationSettings,
    CalculatorState,
    DataSet,
    FunctionEntry,
    History,
    export_state,
    import_state,
    state_from_dict,
    state_to_dict,
)


def _state_with_content():
    state = CalculatorState()
    for text in ["x^2", "x(t) = cos(t), y(t) = sin(t)", "r = 1 + cos(theta)",
                 "x^2 + y^2 = 25", "{x < 0: -x, x}"]:
        state = state.add_function(FunctionEntry.from_text(text))
    state = state.add_dataset(DataSet.create("samples", [DataPoint(1, 2, "a"), DataPoint(3, 4)]))
    return state.with_viewport(Viewport(-5, 5, -2, 8, 2.0)).toggle_theme()


def _without_ids(data):
    for item in data['functions'] + data['datasets']:
        item.pop('id')
    return data


# ============================================================================
# DEFAULTS & UPDATES
# ============================================================================

def test_defaults():
    state = CalculatorState()
    assert state.functions == ()
    assert state.grid_settings.major_grid_spacing == 1
    assert state.grid_settings.minor_grid_spacing == 0.2
    assert state.axis_settings.axis_color == '#475569'
    assert state.animation.duration == 10
    assert state.animation.time_variable == 't'
    assert state.settings.precision == 6
    assert state.settings.shortcuts['ctrl+z'] == 'undo'
    assert state.selected_tool == 'function'


def test_function_entry_from_text():
    entry = FunctionEntry.from_text("x^2")
    assert entry.spec == Cartesian("x^2")
    assert entry.function_type == "quadratic"
    assert entry.id.startswith("func_")
    assert entry.label == "y = x^2"


def test_updates_return_new_states():
    empty = CalculatorState()
    entry = FunctionEntry.from_text("x")
    state = empty.add_function(entry)
    assert empty.functions == ()
    assert state.functions == (entry,)

    recolored = state.update_function(entry.id, color="#000000")
    assert recolored.function(entry.id).color == "#000000"
    assert state.function(entry.id).color == entry.color

    hidden = state.toggle_function_visibility(entry.id)
    assert not hidden.function(entry.id).visible
    assert hidden.toggle_function_visibility(entry.id).function(entry.id).visible

    assert state.remove_function(entry.id).functions == ()


def test_unknown_id_is_a_no_op():
    state = CalculatorState().add_function(FunctionEntry.from_text("x"))
    assert state.update_function("missing", color="#000000") == state
    assert state.remove_function("missing") == state
    assert state.duplicate_function("missing") is state


def test_duplicate_function():
    entry = FunctionEntry.from_text("sin(x)")
    state = CalculatorState().add_function(entry).duplicate_function(entry.id)
    original, copy = state.functions
    assert copy.id != original.id
    assert copy.spec == original.spec
    assert copy.color == FUNCTION_COLORS[1]


def test_dataset_operations():
    dataset = DataSet.create("d", [DataPoint(0, 0), DataPoint(10, 20)])
    state = CalculatorState().add_dataset(dataset)
    renamed = state.update_dataset(dataset.id, name="renamed", points=[DataPoint(1, 1)])
    assert renamed.datasets[0].name == "renamed"
    assert renamed.datasets[0].points == (DataPoint(1, 1),)
    assert state.remove_dataset(dataset.id).datasets == ()
    with pytest.raises(ValueError):
        DataSet.create("bad", [], kind="pie")


def test_fit_to_data():
    dataset = DataSet.create("d", [DataPoint(0, 0), DataPoint(10, 20)])
    state = CalculatorState().add_dataset(dataset).fit_to_data()
    viewport = state.viewport
    assert (viewport.x_min, viewport.x_max) == pytest.approx((-1, 11))
    assert (viewport.y_min, viewport.y_max) == pytest.approx((-2, 22))
    assert CalculatorState().fit_to_data() == CalculatorState()


def test_toggle_theme():
    dark = CalculatorState().toggle_theme()
    assert dark.settings.theme.mode == 'dark'
    assert dark.settings.theme.background_color == '#0f172a'
    assert dark.grid_settings.major_grid_color == '#334155'
    assert dark.axis_settings.label_color == '#cbd5e1'
    light = dark.toggle_theme()
    assert light.settings.theme == CalculatorState().settings.theme
    assert light.grid_settings == CalculatorState().grid_settings


def test_clear_all_keeps_settings():
    state = _state_with_content()
    cleared = state.clear_all()
    assert cleared.functions == () and cleared.datasets == ()
    assert cleared.viewport == Viewport.default()
    assert cleared.settings == state.settings


# ============================================================================
# HISTORY
# ============================================================================

def test_history_undo_redo():
    history = History()
    for value in "abc":
        history.push(value)
    assert history.undo() == "b"
    assert history.undo() == "a"
    assert history.undo() is None
    assert history.redo() == "b"
    assert history.current == "b"


def test_push_discards_redo_branch():
    history = History()
    for value in "abc":
        history.push(value)
    history.undo()
    history.push("d")
    assert not history.can_redo
    assert history.redo() is None
    assert history.undo() == "b"


def test_history_is_bounded():
    history = History(limit=50)
    for i in range(60):
        history.push(i)
    assert len(history) == 50
    assert history.current == 59
    undone = [history.undo() for _ in range(49)]
    assert undone[-1] == 10
    assert history.undo() is None


def test_history_holds_states():
    history = History()
    first = CalculatorState()
    second = first.add_function(FunctionEntry.from_text("x"))
    history.push(first)
    history.push(second)
    assert history.undo() is first


def test_snapshots_do_not_share_shortcuts():
    history = History()
    first = CalculatorState()
    second = first.add_function(FunctionEntry.from_text("x"))
    history.push(first)
    history.push(second)

    with pytest.raises(TypeError):
        second.settings.shortcuts['ctrl+z'] = 'clobbered'

    custom = {'ctrl+z': 'undo', 'ctrl+q': 'quit'}
    third = replace(second, settings=replace(second.settings, shortcuts=custom))
    custom['ctrl+z'] = 'clobbered'
    history.push(third)

    assert third.settings.shortcuts['ctrl+z'] == 'undo'
    assert history.undo().settings.shortcuts['ctrl+z'] == 'undo'
    assert 'ctrl+q' not in first.settings.shortcuts


def test_shortcuts_serialize_as_plain_dict():
    data = state_to_dict(CalculatorState())
    assert type(data['settings']['shortcuts']) is dict
    assert json.loads(export_state(CalculatorState()))['settings']['shortcuts']['space'] == 'play-pause'


# ============================================================================
# ANIMATION
# ============================================================================

def test_clock_variables_only_while_playing():
    clock = AnimationClock()
    assert clock.variables == {}
    clock.play()
    clock.tick()
    assert clock.variables == {'t': pytest.approx(1 / 60)}
    clock.pause()
    assert clock.variables == {}
    assert clock.tick() == pytest.approx(1 / 60)


def test_clock_loops():
    clock = AnimationClock(AnimationSettings(duration=0.04), fps=60)
    clock.play()
    clock.tick()
    clock.tick()
    assert clock.tick() == 0.0
    assert clock.is_playing


def test_clock_stops_at_end_without_loop():
    clock = AnimationClock(AnimationSettings(duration=0.04, loop=False), fps=60)
    clock.play()
    for _ in range(5):
        clock.tick()
    assert clock.current_time == 0.04
    assert not clock.is_playing


def test_clock_speed_and_seek():
    clock = AnimationClock(AnimationSettings(speed=2, time_variable='s'), fps=10)
    clock.play()
    assert clock.tick() == pytest.approx(0.2)
    assert clock.variables == {'s': pytest.approx(0.2)}
    clock.seek(100)
    assert clock.current_time == 10
    clock.seek(-1)
    assert clock.current_time == 0
    clock.seek(3)
    clock.stop()
    assert clock.current_time == 0 and not clock.is_playing


# ============================================================================
# SERIALIZATION
# ============================================================================

def test_snapshot_keys():
    data = state_to_dict(CalculatorState())
    assert set(data) == {"functions", "datasets", "viewport", "gridSettings",
                         "axisSettings", "animation", "selectedTool", "settings"}
    assert data["viewport"] == {"xMin": -10, "xMax": 10, "yMin": -10, "yMax": 10, "zoom": 1}
    assert data["gridSettings"]["majorGridColor"] == '#e2e8f0'
    assert data["settings"]["theme"]["mode"] == 'light'


def test_dict_round_trip_is_exact():
    state = _state_with_content()
    assert state_from_dict(state_to_dict(state)) == state


def test_export_import_round_trip():
    state = _state_with_content()
    text = export_state(state)
    json.loads(text)
    imported = import_state(text)

    assert _without_ids(state_to_dict(imported)) == _without_ids(state_to_dict(state))
    assert {f.id for f in imported.functions}.isdisjoint({f.id for f in state.functions})
    assert [type(f.spec) for f in imported.functions] == [Cartesian, Parametric, Polar,
                                                           Implicit, Piecewise]


def test_import_fills_missing_fields_with_defaults():
    state = import_state(json.dumps({"functions": [{"spec": {"kind": "cartesian", "expression": "x"}}]}))
    assert state.functions[0].spec == Cartesian("x")
    assert state.functions[0].function_type == "linear"
    assert state.viewport == Viewport.default()
    assert state.settings == CalculatorState().settings
