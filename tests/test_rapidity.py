import struct

import pytest

from smashreader.analysis import registry
from smashreader.rapidity import Rapidity
from smashreader.reader import Accessor, ParticleBlock, compute_quantity_layout


def _block(pairs):
    particles = [struct.pack("<dd", p0, pz) for p0, pz in pairs]
    return ParticleBlock(0, 0, len(particles), particles)


@pytest.fixture
def accessor():
    acc = Accessor()
    acc.set_layout(compute_quantity_layout(["p0", "pz"]))
    return acc


def test_registered_as_simple():
    assert "simple" in registry().list_registered()
    assert isinstance(registry().create("simple"), Rapidity)


def test_particle_at_rest_lands_in_central_bin(accessor):
    analysis = Rapidity()
    analysis.analyze_particle_block(_block([(1.0, 0.0)]), accessor)
    assert analysis.histogram.bin_count(50) == 1.0
    assert sum(analysis.histogram.counts) == 1.0


def test_unphysical_particles_are_skipped(accessor):
    analysis = Rapidity()
    analysis.analyze_particle_block(_block([(1.0, 1.0), (1.0, -2.0)]), accessor)
    assert sum(analysis.histogram.counts) == 0.0


def test_mirrored_momenta_fill_mirrored_bins(accessor):
    analysis = Rapidity()
    analysis.analyze_particle_block(_block([(5.0, 3.0), (5.0, -3.0)]), accessor)
    counts = analysis.histogram.counts
    filled = [i for i, c in enumerate(counts) if c]
    assert len(filled) == 2
    assert filled[0] + filled[1] == len(counts) - 1
    assert counts == tuple(reversed(counts))


def test_save_writes_histogram(tmp_path, accessor):
    analysis = Rapidity()
    analysis.analyze_particle_block(_block([(1.0, 0.0)]), accessor)
    analysis.finalize()
    analysis.save(str(tmp_path))
    lines = (tmp_path / "rap.dat").read_text().splitlines()
    assert len(lines) == 100
    assert lines[0] == "-4.9500\t0.0000"
    assert lines[50] == "0.0500\t1.0000"


def test_save_to_missing_directory_raises(tmp_path):
    with pytest.raises(OSError, match="Could not open file"):
        Rapidity().save(str(tmp_path / "absent"))


def test_missing_quantity_in_layout_raises():
    acc = Accessor()
    acc.set_layout(compute_quantity_layout(["p0"]))
    block = ParticleBlock(0, 0, 1, [struct.pack("<d", 1.0)])
    with pytest.raises(RuntimeError, match="Quantity not in layout: pz"):
        Rapidity().analyze_particle_block(block, acc)