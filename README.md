# cadetpinball

The engine pieces of a classic 3D pinball table, in plain Python with no
dependencies outside the standard library.

## Modules

- `cadetpinball.maths`: `Vector`, `Rectangle`, `Circle`, `Ray`, `Line`,
  `WallPoint`, `RampPlane`, `BallState` and `FlipperGeometry`, with rectangle
  helpers (`enclosing_box`, `rectangle_clip`, `overlapping_box`), ray tests
  (`ray_intersect_circle`, `ray_intersect_line`, `distance_to_flipper`),
  vector helpers (`normalize_2d`, `cross`, `magnitude`, `dot_product`,
  `distance`, `rotate_point`, `rotate_vector`, ...), ball bounce response
  (`basic_collision`) and ramp edge lookup (`find_closest_edge`). A ray that
  misses reports `NO_HIT`.
- `cadetpinball.proj`: `Projection`, a camera matrix plus perspective divide
  that maps table coordinates to integer screen pixels (`xform_to_2d`) and
  gives the camera distance of a point (`z_distance`).
- `cadetpinball.timer`: `TimerQueue`, a bounded queue of one-shot callbacks
  driven by a millisecond tick counter.
- `cadetpinball.gdrv`: `Bitmap8` palette-indexed bitmaps, the `Bmp8Header`
  that describes them in a resource file, and a `Palette` that resolves
  indices into 32-bit `0xRRGGBBAA` colours; `copy_bitmap` and
  `copy_bitmap_w_transparency` copy regions between bitmaps.
- `cadetpinball.zdrv`: 16-bit depth maps (`ZMap`) with `fill`, depth-tested
  `paint`, single-depth `paint_flat` and `flip_zmap_horizontally`.
- `cadetpinball.render`: `Renderer`, which keeps a virtual screen and depth
  buffer, tracks dirty `Sprite`s, repaints overlapping sprites and draws balls
  over the table on each `update()`.
- `cadetpinball.score`: `ScoreDisplay`, a right-aligned digit readout drawn
  onto a renderer's screen, and `string_format` for comma-grouped score text.
- `cadetpinball.pinball`: the table's built-in message strings
  (`RC_STRINGS`, `get_rc_string`, `get_rc_int`) and `make_path_name`.
- `cadetpinball.options`: a string-valued `Settings` store (reading a missing
  value stores the default) and the player's `Options`, loaded with
  `Options.load`, saved with `save` and changed through `toggle` with a `Menu`
  item.
- `cadetpinball.high_score`: `HighScoreTable`, five entries best-first, stored
  in `Settings` together with a checksum; a table whose checksum does not
  match is read back empty.
- `cadetpinball.midi`: `mds_to_midi` and `load_mds` turn a MIDS music stream
  into a single-track standard MIDI file, raising `MidsFormatError` for data
  they cannot convert.

## Install

```
pip install cadetpinball
```

## Examples

Format a score the way the table shows it:

```python
from cadetpinball.score import string_format

string_format(1234567)   # "1,234,567"
```

Keep a high-score table in settings:

```python
from cadetpinball.options import Settings
from cadetpinball.high_score import HighScoreTable

settings = Settings()
table = HighScoreTable()
position = table.get_score_position(50000)      # 0 on an empty table
table.place_new_score_into(50000, "Player 1", position)
table.write(settings)

restored = HighScoreTable()
restored.read(settings)
restored[0].score                               # 50000
```

Fire a callback once the game clock passes its due time:

```python
from cadetpinball.timer import TimerQueue

timers = TimerQueue(150)
timers.set(0.4, None, lambda timer_id, caller: print("fired", timer_id))
timers.ticks = 400
timers.check()   # prints "fired 1" and returns 1
```

Convert a MIDS music file to MIDI:

```python
from cadetpinball.midi import load_mds

midi_bytes = load_mds("PINBALL.MDS")
```

## What it does not do

The package holds building blocks only. It has no game loop, no table
components (flippers, bumpers, plunger and so on), no reader for the table's
resource data file, no sound or music playback, and no window, screen output
or input handling. There is no command to run.

## Running the tests

```
pip install -e .[test]
pytest
```