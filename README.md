# millsim

A library of building blocks for simulating a three-axis milling machine and for generating
its tool paths.

## Modules

- `millsim.gcode` reads and writes programs made of `G01` moves: `parse_gcode` (from a file),
  `parse_gcode_lines` (from any iterable of lines), `format_gcode` and `export_gcode`
  (written with CRLF line endings and three decimals). A program point `X, Y, Z` becomes the
  scene point `(X, Z, -Y)`, and a coordinate missing from a line keeps its previous value.
- `millsim.heightmap.HeightMap` holds the block of material as a numpy grid of heights
  (`data`), with `resize` and `normalized` (heights divided by `max_value`, transposed).
- `millsim.mill.Mill` cuts a height map (indexed `[row][col]`) along a path with a flat or
  spherical cutter (`MillType.FLAT`, `MillType.SPHERICAL`). It moves step by step with
  `advance(height_map, base_dimensions, delta_time)`, segment by segment with `run_instant`,
  or in a background thread with `start_instant` and `start_milling`; `wait`, `signal_stop`,
  `path_finished`, `check_error` and `clear_error` follow the thread. A cut raises
  `MillError` when the target goes below `min_height`, when a flat cutter descends more
  steeply than `max_descend_angle` allows, or when material would be removed by the
  non-cutting part of the tool. In a background thread the error is kept and reported by
  `check_error`.
- `millsim.bresenham` rasterises lines: `bresenham` yields `(x, y, t)` pixels in 2D,
  `bresenham_3d` returns a list of voxels.
- `millsim.patch` evaluates surfaces made of bicubic Bezier patches (`PatchC0`) and uniform
  bicubic B-spline patches (`PatchC2`): `evaluate`, `evaluate_du`, `evaluate_dv` and
  `evaluate_tool` (a point offset by a radius along the normal). `patch_indices` builds the
  16-index-per-patch layout; `bernstein_basis`, `bspline_basis`, `de_boor_coeffs` and `cap`
  are available on their own.
- `millsim.roughing` turns a top-down depth image (a 2D array of depth values, 0 to 1, over a
  150-unit base) into roughing paths: `k16_path` (ball cutter, two passes), `f10_path` (flat
  cutter around the model at base height), with `max_height` and `depth_to_height`.
- `millsim.pathgen` builds finishing paths: `analytical_f10_path` (following named outlines
  and switching between them where they meet), `eye_path` (a spiral pocket between two
  outlines), `mask_path` (zigzag over a colour region of a mask, milled on a surface) and
  `intersection_path` (curves given in surface parameters). `segments_intersect` and
  `outside_range` are the helpers they use.
- `millsim.mask.IntersectionMask` samples an RGBA array by coordinates in `[0, 1)`; it can
  be loaded from an image file with `IntersectionMask.from_file`.
- `millsim.outlines` prepares helper outlines: `prepare_outlines` reverses, joins and splits
  the named outlines the path generators expect; `split_half` splits a sequence in two.
- `millsim.model` fits a model into the stock: `generate_transform` (a 4x4 matrix),
  `transform_points`, `upload_points` (renumbering), and `c0_surface_point_ids` /
  `c2_surface_point_ids` (flattening per-patch control points into one grid).
- `millsim.geometry` builds simple triangle meshes (`generate_cylinder`, `generate_sphere`,
  `generate_quad`) as `MeshData` of `Vertex` objects.

## Install

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from millsim.gcode import parse_gcode, export_gcode
from millsim.heightmap import HeightMap
from millsim.mill import Mill, MillError

path = parse_gcode("program.k16")
stock = HeightMap((256, 256), 50.0)

mill = Mill(40, 8, (0, 60, 0), 300, 0.999, 10)
mill.set_path(path)
try:
    mill.run_instant(stock.data, (150, 50, 150))
except MillError as error:
    print("milling stopped:", error)

export_gcode("copy.k16", path)
```

## What it does not do

- There is no command-line program, window or 3D view: meshes from `millsim.geometry` are
  plain data and nothing draws them.
- It does not read model or outline files. Points, control grids and outlines are passed in
  as Python data, and the depth image for `millsim.roughing` must be produced by the caller.