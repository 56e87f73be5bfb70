import struct

import pytest

from smashreader.analysis import (
    Analysis,
    AnalysisRegistry,
    DispatchingAccessor,
    register_analysis,
    registry,
)
from smashreader.reader import BinaryReader


class Recorder(Analysis):
    def __init__(self):
        self.seen = []
        self.finalized = False

    def analyze_particle_block(self, block, accessor):
        pdgs = [accessor.get_int("pdg", block, i) for i in range(block.npart)]
        self.seen.append((block.event_number, pdgs))

    def finalize(self):
        self.finalized = True

    def save(self, save_dir_path):
        with open(f"{save_dir_path}/recorder.txt", "w") as out:
            out.write(repr(self.seen))


def _header(version=b"3.1"):
    return struct.pack("<4sHHI", b"SMSH", 9, 0, len(version)) + version


def _particles(event, records):
    return b"p" + struct.pack("<iiI", event, 0, len(records)) + b"".join(records)


def _end(event, impact):
    return b"f" + struct.pack("<Iidc", event, 0, impact, b"\x00")


def _record(p0, pdg):
    return struct.pack("<di", p0, pdg)


def test_analysis_is_abstract():
    with pytest.raises(TypeError):
        Analysis()


def test_registry_create_unknown_raises():
    reg = AnalysisRegistry()
    with pytest.raises(KeyError, match="No such analysis: missing"):
        reg.create("missing")


def test_registry_creates_fresh_instances():
    reg = AnalysisRegistry()
    reg.register_factory("rec", Recorder)
    first = reg.create("rec")
    second = reg.create("rec")
    assert isinstance(first, Recorder)
    assert first is not second
    assert reg.list_registered() == ["rec"]


def test_registry_replaces_factory():
    reg = AnalysisRegistry()
    reg.register_factory("x", Recorder)
    marker = Recorder()
    reg.register_factory("x", lambda: marker)
    assert reg.create("x") is marker
    assert reg.list_registered() == ["x"]


def test_global_registry_and_decorator():
    assert registry() is registry()

    @register_analysis("test-analysis-decorated")
    class Decorated(Recorder):
        pass

    assert "test-analysis-decorated" in registry().list_registered()
    assert isinstance(registry().create("test-analysis-decorated"), Decorated)


def test_dispatching_accessor_forwards_blocks(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(
        _header()
        + _particles(0, [_record(1.0, 211), _record(2.0, -211)])
        + _end(0, 1.5)
        + _particles(1, [_record(3.0, 2212)])
        + _end(1, 2.5)
    )
    dispatcher = DispatchingAccessor()
    first, second = Recorder(), Recorder()
    dispatcher.register_analysis(first)
    dispatcher.register_analysis(second)
    with BinaryReader(path, ["p0", "pdg"], dispatcher) as reader:
        reader.read()
    assert first.seen == [(0, [211, -211]), (1, [2212])]
    assert second.seen == first.seen


def test_dispatching_accessor_ignores_end_blocks(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(_header() + _end(0, 1.0) + _end(1, 2.0) + b"i")
    dispatcher = DispatchingAccessor()
    recorder = Recorder()
    dispatcher.register_analysis(recorder)
    with BinaryReader(path, ["p0", "pdg"], dispatcher) as reader:
        reader.read()
    assert recorder.seen == []


def test_registered_analysis_read_and_save(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(
        _header() + _particles(3, [_record(1.0, 1)]) + _end(3, 0.5)
    )
    reg = AnalysisRegistry()
    reg.register_factory("rec", Recorder)
    recorder = reg.create("rec")
    dispatcher = DispatchingAccessor()
    dispatcher.register_analysis(recorder)
    with BinaryReader(path, ["p0", "pdg"], dispatcher) as reader:
        reader.read()
    recorder.finalize()
    recorder.save(str(tmp_path))
    assert recorder.finalized
    assert (tmp_path / "recorder.txt").read_text() == "[(3, [1])]"