# cassebrique

A brick-breaker arcade game. You steer a paddle with the mouse and bounce balls
into blocks across five levels, which follow one another in a loop:

1. a plain grid of blocks
2. an offset brick wall shaded in grey
3. rivals: two balls, each of which breaks only the blocks of its own colour
4. pong: a block formation that slides sideways to follow the ball
5. invaders: a formation of space invaders that marches sideways and down

You start each level with three lives. Losing the last one restarts the level;
clearing every block moves on to the next. Breaking blocks quickly one after
another scores a time bonus.

Destroyed blocks sometimes drop collectibles that fall towards the paddle.
Power-ups give five seconds of invincibility (the floor bounces the ball back),
a triple shot (two extra balls on the next paddle hit) or a comet ball that
ploughs through blocks. Power-downs cost a life, make blocks unbreakable for
five seconds, reverse the controls for five seconds or slow the paddle for
five seconds.

## Installing

```
pip install .
```

## Playing

```
cassebrique
```

Options:

- `--data-dir DIR`: directory holding the `Sprites` and `Sounds` folders
  (default: `..`, relative to the working directory)
- `--seed N`: random seed; by default it is taken from the current time
- `--no-audio`: run without sound
- `--development`: debug controls and overlay (see below)

Controls:

- mouse: move the paddle
- left / right arrows: go to the previous / next level
- P: pause and release the mouse; losing window focus also pauses
- F5: cycle the window size (1280x720, 1920x1080, 2560x1440, capped by the screen)
- Escape: quit

With `--development`, holding Down runs the simulation ten times faster,
holding Up adds invincibility time, the frame rate is shown at the top, and the
arrow keys move two levels per press.

## Assets

The sprites (animated GIFs for the collectibles and the strong-block look) and
the sounds (a music loop and a sine tone, 16-bit 44.1 kHz PCM WAV) are not part
of the package. They are looked up under `--data-dir`, in
`Sprites/Animations/Powerups`, `Sprites/Animations/Powerdowns`,
`Sprites/Blocks`, `Sounds/Musics` and `Sounds/Effects`. Any file that is missing
or unreadable is skipped: collectibles are then drawn as plain yellow squares
and blocks keep their usual colour, and no sound plays in its place.

## Using the pieces

- `cassebrique.mathutil`: `V2`, `V2i`, `M2`, `clamp`, `lerp`, `lerp_color`,
  colour helpers and the `XorShiftRandom` generator
- `cassebrique.wav`: `load_wav` and `load_wav_from_bytes` for 16-bit 44.1 kHz
  mono or stereo PCM WAV files, raising `WavFormatError` on anything else;
  `iter_chunks` walks the chunks of a RIFF body
- `cassebrique.audio`: a `Mixer` of up to 32 `PlayingSound`s, each with pan,
  volume, speed and looping, mixed into interleaved stereo 16-bit samples
- `cassebrique.controls`: `Controls`, the per-frame button and mouse state
- `cassebrique.render`: a `Canvas` software renderer (rectangles, rotated and
  transparent rectangles, digits, bitmaps) and `load_gif` for animated sprites
- `cassebrique.levels`: `BlockPool`, `CollPool` and the level layouts
- `cassebrique.collision`: box overlap and ball responses against arena,
  paddle and blocks
- `cassebrique.game`: the `Game` simulation, advanced and drawn onto its
  canvas by `Game.update(dt, controls)`
- `cassebrique.app`: the window and main loop (`main`), plus `JobQueue`, a
  small pool of worker threads

```python
from cassebrique.wav import load_wav
from cassebrique.audio import Mixer

mixer = Mixer()
playing = mixer.play(load_wav("music.wav"), looping=True)
playing.volume = 0.5
samples = mixer.mix(735)  # one frame at 44.1 kHz
```

A game can also be run without a window:

```python
from cassebrique.controls import Controls
from cassebrique.game import Game
from cassebrique.mathutil import XorShiftRandom
from cassebrique.render import Canvas

game = Game(canvas=Canvas(320, 180), rng=XorShiftRandom(1))
game.update(1 / 60, Controls())
print(game.score, game.number_of_life)
```

## What it does not do

There is no title screen or menu, no saved high scores and no settings file;
the score resets whenever a level restarts.

## Tests

```
pip install .[test]
pytest
```