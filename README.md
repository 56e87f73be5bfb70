# smashreader

Read SMASH binary particle output and run analyses over it.

## File format handled

A file starts with a header: a 4-byte magic number, the format version and
variant (16-bit each), and a length-prefixed SMASH version string. Blocks
follow, each introduced by a one-byte marker:

- `p`: a particle block, with event number, ensemble number, particle count
  and one fixed-size record per particle;
- `f`: an end-of-event block, with event number, ensemble number and impact
  parameter.

All values are little-endian. The per-particle record holds the quantities
you select, in the order you select them. The known quantities are `mass`,
`p0`, `px`, `py`, `pz` (doubles) and `pdg`, `ncoll`, `charge` (int32).

## Installation

```
pip install .
```

## Command line

```
smashreader particles_binary.bin
```

This reads the file assuming the record layout `p0 px py pz pdg charge`,
runs the registered `simple` analysis (`smashreader.rapidity.Rapidity`, a
rapidity histogram over [-5, 5) in 100 bins, skipping particles with
`p0 <= |pz|`) and writes the histogram to `rap.dat` in the current
directory, one `center<TAB>count` line per bin with four decimals. It exits
with status 1 and a message on standard error when the argument count is
wrong or the file cannot be read.

## Library use

### Reading

`smashreader.reader.BinaryReader(filename, selected, accessor)` opens the
file and computes the record layout from the selected quantity names.
`read()` parses the whole file, passes blocks to the accessor's
`on_particle_block` and `on_end_block`, and returns the `Header`
(`Header.format()` gives a readable summary). The reader is a context
manager; `close()` closes the file.

A block is passed on only when another block marker follows it, so the last
block of a file is read but not dispatched.

Inside a callback, an `Accessor` decodes quantities of one particle:
`get_double(name, block, index)`, `get_int(name, block, index)` and
`quantity(name, block, index)` for either type. The base `Accessor` keeps
the most recent blocks in `last_particle_block` and `last_end_block`.

### Collecting into arrays

```python
from smashreader.reader import BinaryReader
from smashreader.collectors import CollectorAccessor

collector = CollectorAccessor()
with BinaryReader("particles_binary.bin", ["p0", "px", "py", "pz", "pdg"], collector) as reader:
    reader.read()

energies = collector.get_double_array("p0")   # numpy float64
pdg_codes = collector.get_int_array("pdg")    # numpy int32
sizes = collector.get_event_sizes()           # particles per dispatched block
```

`DictCollectorAccessor` gathers one dictionary per particle instead;
`get_particle_dicts()` returns them.

### Analyses

Subclass `smashreader.analysis.Analysis` and register it by name:

```python
from smashreader.analysis import Analysis, register_analysis
from smashreader.histogram import Histogram1D

@register_analysis("pt")
class TransverseMomentum(Analysis):
    def __init__(self):
        self.hist = Histogram1D(0.0, 5.0, 50)

    def analyze_particle_block(self, block, accessor):
        for i in range(block.npart):
            px = accessor.get_double("px", block, i)
            py = accessor.get_double("py", block, i)
            self.hist.fill((px * px + py * py) ** 0.5, 1.0)

    def finalize(self):
        pass

    def save(self, save_dir_path):
        with open(f"{save_dir_path}/pt.dat", "w") as out:
            self.hist.write(out)
```

`registry().create("pt")` makes a fresh instance (an unknown name raises
`KeyError`); `registry().list_registered()` lists the names in sorted order.
Attach analyses to a `DispatchingAccessor` with its `register_analysis(...)`
method; it forwards every dispatched particle block to each of them and
ignores end-of-event blocks.

`smashreader.histogram.Histogram1D(low, high, bins)` provides `fill`,
`bin_center`, `bin_count`, `counts`, `len()`, `write` and `merge` (same
binning only).

### Errors

An unopenable or truncated file, an unknown quantity, a quantity missing
from the layout, a type mismatch in `get_int`/`get_double`, or a missing
layout raise `smashreader.reader.BinaryReaderError`. An out-of-range particle
or bin index raises `IndexError`.

## Limitations

- Interaction blocks (`i`) are not decoded; their marker is skipped and no
  callback is made for them.
- The command line has no options: the record layout, the analysis and the
  output location are fixed as described above.
- Only the eight quantities listed above are known.