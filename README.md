# parlabs

A set of small programs about concurrency. The pieces behind them can also be
used as a library:

- `parlabs.bank`: a thread-safe `Bank` with accounts and cash in circulation.
- `parlabs.citizens` and `parlabs.simulation`: citizens who pay each other,
  withdraw cash and hand it on, run one after another or one thread each.
- `parlabs.warehouse`: suppliers, clients and auditors share one bounded stock.
- `parlabs.life`: Conway's Game of Life on a wrapping field. Bands of rows are
  computed in threads.
- `parlabs.blur`: a separable Gaussian blur of RGBA images. Bands of rows are
  computed in threads, and gamma correction follows.
- `parlabs.note` and `parlabs.melody`: melody files rendered to sine-wave
  samples and played.
- `parlabs.semaphore_demo`: two threads held back by a semaphore.
- `parlabs.archiver` and `parlabs.extractor`: gzip files one by one or in
  worker processes, bundle them into a tar archive, and unpack them again.

## Installation

```
pip install .
```

To run the tests, install the test extra:

```
pip install ".[test]"
pytest
```

## Commands

### Bank simulation

```
parlabs-bank 10000 parallel
parlabs-bank 10000 sequential
parlabs-bank 10000 parallel extended
```

The arguments are the initial cash, the mode, and optionally the cast of
citizens. The cast is `classic` by default, or `extended`. The bank opens
accounts for Homer, Marge, Apu and Burns and deposits a quarter of the cash
into each. The citizens then keep trading until SIGINT (Ctrl+C) or SIGTERM.

- `classic`: Bart and Lisa pass every bit of cash they get straight on to Apu.
- `extended`: Bart and Lisa keep their cash and hand their holding to Apu on
  each of their turns. Nelson also takes part. He steals cash from them and
  gives it to Apu.

Each citizen prints its balance at the start and end of every turn. Failed
payments are reported on standard error. When the run ends, the command prints
the number of bank operations, the cash in circulation and the total on all
accounts. With `extended` it also checks that cash plus accounts still equals
the initial cash. If it does, it prints `Ravno`; if not, it prints
`Not enough` on standard error.

### Warehouse

```
parlabs-warehouse NUM_SUPPLIERS NUM_CLIENTS NUM_AUDITORS
```

The warehouse holds at most 100 goods. Suppliers add random batches of 1 to 10
goods and clients take them. A supplier waits while its batch does not fit,
and a client waits while there is not enough stock. Auditors keep reading the
stock. Stop the run with Ctrl+C. The command then prints how much was
supplied, how much was purchased and what remains in stock.

### Game of Life

```
parlabs-life generate field.txt 40 20 0.3
parlabs-life step field.txt 4
parlabs-life step field.txt 4 next.txt
parlabs-life visualize field.txt 4
```

- `generate` writes a random field of the given width and height, where each
  cell is alive with the given probability.
- `step` reads a field, advances it by one generation with the given number of
  threads, and writes the result. By default it writes back to the input file.
- `visualize` opens a window that shows the field evolving, 10 pixels per
  cell. The title shows how long each generation took. Close the window to
  stop.

A field file starts with a line `WIDTH HEIGHT`. One line follows for each row,
with `#` for a live cell and a space for a dead one. Short rows are padded
with dead cells.

### Gaussian blur

```
parlabs-blur input.png output.png 5 4
parlabs-blur input.png output.png 5 4 --visualize
```

The arguments are the input image, the output image, the blur radius and the
number of threads. The image is converted to RGBA and blurred vertically, then
horizontally, with sigma set to half the radius. Gamma 1.5 is then applied to
the colour channels. A radius of 0 saves the image unchanged. If the output
format cannot hold RGBA, the image is saved as RGB. With `--visualize`, the
result is also shown scaled in an 800×600 window.

### Melody player

```
parlabs-player song.txt
```

The first line of the file is the tempo, in notes per minute. Each following
line holds one note:

- `A4`, `C#5`: a note name from A to G, optionally sharp, and an octave from
  0 to 8. A4 is 440 Hz.
- `-` on its own, or a note with a trailing `-` such as `G3-`, releases the
  sounding note. Releasing repeats the note once, fading out.

Reading stops at a line `END`. Empty lines are skipped. A new note blends in
the faded tail of the previous one. Samples are rendered at 44100 Hz and
played on the default audio device.

### Semaphore demo

```
parlabs-semaphore
```

Two worker threads wait on a semaphore. After five seconds the main thread
prints `Main thread` and releases both. Each worker then prints
`threadN work!`.

### Archiving

```
parlabs-archive -S files.tar a.txt b.txt
parlabs-archive -P 4 files.tar a.txt b.txt c.txt
parlabs-extract -S files.tar out
parlabs-extract -P 4 files.tar out
```

`-S` works sequentially and `-P N` uses up to N worker processes. Both
commands print how long the compression or extraction took and the total
time.

`parlabs-archive` resolves the archive and input paths against the current
directory. It rejects paths that start with `~`. It writes a `.gz` file next
to each input and keeps the original. It stores the `.gz` files in the tar
archive and then deletes them. Files that fail to compress are reported and
left out.

`parlabs-extract` accepts absolute paths or paths relative to the current
directory, and creates the output folder if needed. It strips as many leading
path components from each archive member as the archive's own directory has.
Every `.gz` file found in the output folder is then decompressed and the `.gz`
file removed. Compression and extraction are done in Python with `gzip` and
`tarfile`, so no external programs are needed.

## Library use

```python
from parlabs.bank import Bank, BankOperationError

bank = Bank(1000)
alice = bank.open_account()
bob = bank.open_account()

bank.deposit_money(alice, 500)
bank.send_money(alice, bob, 200)
print(bank.account_balance(bob))            # 200
print(bank.cash)                            # 500

if not bank.try_withdraw_money(alice, 1000):
    print("not enough funds")

try:
    bank.withdraw_money(alice, 1000)
except BankOperationError as error:
    print(error)                            # Insufficient funds
```

Negative amounts raise `ValueError`. Unknown accounts and insufficient funds
or cash raise `BankOperationError`. `operations_count` counts every operation,
including account openings.

```python
from parlabs.life import next_generation
from parlabs.note import Note

blinker = ["     ", "  #  ", "  #  ", "  #  ", "     "]
print(next_generation(blinker, threads=2))

print(Note("A4").frequency())               # 440.0
```

## Limitations

- The blur window shows the finished image only. It has no controls for
  changing the radius or picking another image.
- The bank simulation and the warehouse run until they receive a signal.
  They have no time or round limit.