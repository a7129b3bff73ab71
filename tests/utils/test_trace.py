from pychip8.cpu import CPUState
from pychip8.utils.trace import TraceRecorder


def _state(pc: int, i: int = 0, sp: int = 0) -> CPUState:
    state = CPUState()
    state.pc = pc
    state.i = i
    state.sp = sp
    return state


def test_trace_recorder_overwrites_old_entries():
    recorder = TraceRecorder(capacity=2)

    recorder.record_step(_state(0x200), 0x6005, mnemonic="LD")
    recorder.record_step(_state(0x202, i=0x300), 0xA300, delay=3, mnemonic="LD")
    recorder.record_step(_state(0x204, sp=1), 0xF00A, stalled=True, mnemonic="LD", note="key")

    lines = list(recorder.format_entries())
    assert len(recorder) == 2
    assert len(lines) == 2
    assert "pc=202" in lines[0]
    assert "I=300" in lines[0]
    assert "DT=03" in lines[0]
    assert "pc=204" in lines[1]
    assert "flags=WAIT,key" in lines[1]


def test_trace_recorder_handles_missing_opcode():
    recorder = TraceRecorder(1)
    recorder.record_step(_state(0x100), None, halted=True, note="fault")
    lines = list(recorder.format_entries())
    assert len(lines) == 1
    assert "opcode=----" in lines[0]
    assert "flags=HALT,fault" in lines[0]


def test_trace_registers_are_snapshotted():
    recorder = TraceRecorder(4)
    state = _state(0x200)
    state.v[0xF] = 0x01
    recorder.record_step(state, 0x8014)
    state.v[0xF] = 0x00

    entry = recorder.last_entry()
    assert entry is not None
    assert entry.registers[0xF] == 0x01
    assert "V=[00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 01]" in recorder.format_entries()[0]


def test_trace_limit_and_clear():
    recorder = TraceRecorder(8)
    for offset in range(5):
        recorder.record_step(_state(0x200 + 2 * offset), 0x0000)

    assert len(list(recorder.entries(limit=2))) == 2
    assert list(recorder.entries(limit=2))[-1].pc == 0x208

    recorder.clear()
    assert recorder.last_entry() is None
    assert list(recorder.format_entries()) == []
