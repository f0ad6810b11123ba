# sunnynes

Pieces of a Nintendo Entertainment System emulator in plain Python, with no
third-party dependencies:

- **The 2A03 audio processing unit** (`sunnynes.apu`, `sunnynes.components`):
  two square channels, triangle, noise and delta modulation, the frame
  counter, the mixer lookup tables and a 40-tap low-pass FIR filter that
  produces samples at 44.1 kHz.
- **Audio output plumbing** (`sunnynes.audio`): a DC-cutoff filter
  (`DcFilter`) and a multi-buffer sample queue (`SampleQueue`) between the
  emulation loop and an audio callback.
- **Startup options** (`sunnynes.options`): the `settings.json` format, which
  allows `//` comments, with key bindings, window size, font and a
  fullscreen flag.
- **Front-end helpers**: window layout (`sunnynes.layout`), an immediate-mode
  GUI state machine (`sunnynes.gui`), frame timing (`sunnynes.timer`), a file
  picker (`sunnynes.filedialog`), and the data behind the debug views
  (`sunnynes.waveform`, `sunnynes.debugview`).

## Audio unit

An `Apu` is built around an `ApuHost`, the CPU side of the machine. The host
answers DMC memory reads (`bus_read`), raises and lowers interrupt lines
(`irq_set`, `irq_clear`; index 0 is the DMC interrupt, 1 the frame
interrupt), reports whether an OAM DMA is running (`dma_active`) and accepts
CPU stalls (`stall`). The constructor powers the unit on and resets it. Each
call to `clock` is one master (PPU) clock cycle.

```python
from sunnynes.apu import Apu

apu = Apu(host)

apu.write(0x4015, 0x01)   # enable square 1
apu.write(0x4000, 0xBF)   # duty 2, constant volume 15
apu.write(0x4002, 0xFD)
apu.write(0x4003, 0x08)

for _ in range(29_780 * 3):
    apu.clock()

samples = apu.take_samples()   # 44.1 kHz floats produced since the last call
```

`Apu.read(0x4015)` returns the status register and clears the frame
interrupt; other addresses read as 0. `Apu.set_channel` takes `Channel` flags
(`SQ1`, `SQ2`, `TRI`, `NOISE`, `DMC`) to mute or unmute channels in the mix.
Each channel also feeds an `AudioWindow`, a 2048-sample ring buffer of
DC-filtered samples (`apu.sq1_window`, `sq2_window`, `tri_window`,
`noise_window`) used for waveform display.

## Feeding an audio device

```python
from sunnynes.audio import SampleQueue

queue = SampleQueue(2048, 3)
queue.write(samples)        # producer side, from the emulation loop
block = queue.fill(2048)    # consumer side, from the audio callback
```

`write` blocks whenever it fills a buffer and no further buffer is free, so
the producer and consumer are meant to run on different threads. `fill`
returns the next full buffer passed through a `DcFilter` (any value outside
[-1, 1] becomes 0.0), or silence when no buffer has been filled yet.

## Startup options

```python
from sunnynes.options import load_options, parse_options, OptionsError

options = load_options("settings.json")
```

If the file does not exist, `load_options` writes a default one and returns
the default `StartupOptions`. If it cannot be parsed, the error is logged and
the defaults are returned. `parse_options` works on text and raises
`OptionsError` describing the problem; buttons it does not bind are left at
scancode 0. `strip_comments` blanks out `//` comments without moving other
characters. `scancode_from_name` maps key names such as `"X"`, `"RETURN"` or
`"UP"` to scancodes regardless of case, and `scancode_name` goes the other way.

## Layout and GUI

```python
from sunnynes.layout import compute_window_metrics, menu_button_spans

metrics = compute_window_metrics(1305, 738, True)
for label, target, rect in menu_button_spans(metrics):
    ...
```

`compute_window_metrics` keeps the 256×240 screen's aspect ratio and decides
whether there is room for the debug panel (`metrics.draw_debug_view`).
`Settings`, `ChannelEnable`, `EmulationMode` and `DrawTarget` hold the
application's runtime state.

`sunnynes.gui.Gui` is created with `GuiMetrics` and a function measuring text
width. During a frame, `button` returns whether it was clicked, `checkbox`
returns `(pressed, value)` and `scroll_bar` returns `(changed, value)`; the
rectangles and text each widget would draw are collected in `gui.quads` and
`gui.texts`. `end_frame` takes the mouse position and button state for the
next frame and clears those lists; `dispatch_wheel` records wheel movement.
A dragged scroll bar is tracked by `djb2_hash` of its label.

## Timing and file selection

`sunnynes.timer.FrameTimer` averages frame times over a window of frames;
`remaining_frame_time` gives the microseconds left in a 60 FPS frame and
`sleep_micro` sleeps for them. `sunnynes.filedialog.open_file_dialog` runs
`zenity --file-selection` and returns the chosen path, raising
`FileDialogError` if the dialog cannot start or nothing is chosen.

## Debug views

- `sunnynes.waveform`: `pulse_trigger`, `triangle_trigger` and `no_trigger`
  pick where to start drawing an `AudioWindow`; `waveform_points` turns it
  into one point per pixel column of a `Rect`.
- `sunnynes.debugview`:
  - `hex_row` and `memory_lines` build hex dumps from a read function.
  - `stack_lines` lists up to seven stack entries.
  - `flag_states` splits a register into its flag letters.
  - `rasterize_pattern_table` turns a 4 KiB pattern table into 128×128
    two-bit palette indices.
  - `controller_button_names` and `control_lines` build the controls listing.
  - `grid_lines` gives the 8×8 tile grid drawn over the screen.

## What this package does not do

It has no CPU, picture unit, cartridge loading or save handling, so it cannot
run a game by itself. It opens no window, draws nothing and plays no sound:
the GUI, layout and view helpers only compute state, geometry and text, and
the sample queue only hands samples to whatever audio device the caller
provides. There is no command-line program.

## Running the tests

Install the `test` extra, then run `pytest` from the project root.