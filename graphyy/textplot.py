"""
ASCII plot
Renders sampled curves into a character grid for terminal output.
"""

MARKERS = ['*', 'o', '+', 'x', '#', '@', '%', '&']
HIGHLIGHT_MARKER = '●'

V_AXIS = '│'
H_AXIS = '─'
ORIGIN = '┼'


def _cell(x_val, y_val, viewport, width, height):
    col = int((x_val - viewport.x_min) / viewport.width * width)
    row = int((viewport.y_max - y_val) / viewport.height * height)
    return max(0, min(height - 1, row)), max(0, min(width - 1, col))


def render_text_plot(curves, viewport, width=75, height=24, highlights=()):
    """
    Draw curves as marker characters on a width x height grid.

    ``curves`` holds ``Curve`` objects or plain point lists; each gets the
    next marker. ``highlights`` (e.g. intersections) are drawn on top.
    The last line reports the visible range.
    """
    grid = [[' ' for _ in range(width)] for _ in range(height)]

    # Draw axes
    if viewport.x_min <= 0 <= viewport.x_max:
        _, zero_col = _cell(0, viewport.y_min, viewport, width, height)
        for r in range(height):
            grid[r][zero_col] = V_AXIS

    if viewport.y_min <= 0 <= viewport.y_max:
        zero_row, _ = _cell(viewport.x_min, 0, viewport, width, height)
        for col in range(width):
            grid[zero_row][col] = ORIGIN if grid[zero_row][col] == V_AXIS else H_AXIS

    for index, curve in enumerate(curves):
        marker = MARKERS[index % len(MARKERS)]
        points = curve.points if hasattr(curve, 'points') else curve
        for x_val, y_val in ((p[0], p[1]) for p in points):
            if viewport.x_min <= x_val <= viewport.x_max and viewport.y_min <= y_val <= viewport.y_max:
                row, col = _cell(x_val, y_val, viewport, width, height)
                if grid[row][col] != ORIGIN:
                    grid[row][col] = marker

    for x_val, y_val in ((p[0], p[1]) for p in highlights):
        if viewport.x_min <= x_val <= viewport.x_max and viewport.y_min <= y_val <= viewport.y_max:
            row, col = _cell(x_val, y_val, viewport, width, height)
            grid[row][col] = HIGHLIGHT_MARKER

    lines = [''.join(line) for line in grid]
    lines.append(f"x:[{viewport.x_min:.1f},{viewport.x_max:.1f}] "
                 f"y:[{viewport.y_min:.1f},{viewport.y_max:.1f}]")
    return '\n'.join(lines)
