# a113

A small library of building blocks for programs that talk to devices and to
each other: status codes, address conversion, byte ports over TCP and serial
lines, shared-object dispensers, caches, timers and a token-routing network.

## Modules

- `a113.status`: the `Status` codes (`OK` is 0, failures are negative),
  `status_message()` giving a code's name, and `A113Error`, the exception
  raised by failing calls; its `status` attribute holds the `Status`.
- `a113.addresses`: IPv4 and Bluetooth address conversion.
  `ipv4_to_str` / `ipv4_from_str` work on a 32-bit integer holding the first
  octet in its low byte; `ipv4_from_str` returns 0 for text with fewer than
  four dot-separated parts. `bt_to_str(addr, upper)` renders six bytes as
  colon-separated hex; `bt_from_str` reads six colon-separated decimal fields
  and returns six zero bytes when it cannot.
- `a113.port`: the abstract `Port` with `read(size, fail_if_not_all)` and
  `write(data, fail_if_not_all)`, plus `read_exactly(size)` and
  `write_all(data)`, which loop and raise `A113Error(Status.FLOW)` if the
  port stalls.
- `a113.block_diffuser`: `BlockDiffuser(capacity)`, a fixed-capacity pool.
  `inject(content)` puts content in the lowest free slot and returns its
  `Block` (or `None` when full), `eject(block)` frees the slot, and iteration
  yields live blocks in slot order.
- `a113.core`: per-component loggers (`LogComponent`, `get_logger`,
  `set_log_level`) writing to standard output, and `init(argv, flags)`, which
  logs a greeting, checks that sockets can be created when `InitFlags.SOCKETS`
  is given, and returns the number of warnings.
- `a113.cache`: `Bucket`, a thread-safe key/value cache. `query(key, handle)`
  returns the value (or `None`) together with the updated `BucketHandle`;
  `commit(key, value, handle)` stores unless the handle carries `BYPASS`;
  `store(key, value)` always stores.
- `a113.dispenser`: `Dispenser(factory, mode, config)` hands out watch
  (read) and control (write) `Acquisition`s in one of four `DispenserMode`s:
  `LOCK` (readers-writer lock), `DROP` (a control works on a fresh object and
  publishes it on release), `SWAP` and `REVERSE_SWAP` (double buffering).
  Acquisitions are context managers; `hold_latest()` returns the latest
  published object and `switch_swap_mode()` switches between the two swap
  modes.
- `a113.tempo`: `Ticker` for up-time and lap measurements in any `Tick` unit
  (`NS`, `US`, `MS`, `S`, `M`, `H`), `Ticker.epoch(unit)`, and
  `InterruptibleSleep`, a sleep that `interrupt()` from another thread cuts
  short.
- `a113.hyper_net`: an `Executor` that moves `Token`s between `Port`s along
  `Route`s, one `clock()` tick at a time, with `InPlan` / `OutPlan` setting
  how many tokens a route draws and where they go, `FlightMode` for vanishing
  or splitting tokens, and `AssertType` answers from `Token.assert_route()`.
  `make_graphviz()` draws the network as a Graphviz digraph. Unknown port or
  route ids raise `KeyError`.
- `a113.sockets`: `IPv4TcpSocket`, a one-peer TCP `Port`. `bind_peer` sets
  the peer, `uplink` connects to it, `listen` waits for one peer on the bound
  port (the peer address must be 0), `downlink` closes.
- `a113.serial_port`: `Serial`, a serial line built on pyserial, opened with
  a `SerialConfig` (baud rate, byte size, `Parity`, `StopBits`, timeouts in
  milliseconds, purge on open or close). Also `rx_available()` and `purge()`.
- `a113.com_ports`: `ComPorts`, a `Dispenser` of the system's serial ports as
  `ComPort(id, friendly)` entries, with `refresh()` and keyed refresh
  callbacks. An `enumerator` callable may replace the system listing.

## Install

```
pip install .
```

## Examples

Addresses:

```python
from a113.addresses import ipv4_from_str, ipv4_to_str, bt_to_str

addr = ipv4_from_str("192.168.0.1")
assert ipv4_to_str(addr) == "192.168.0.1"
print(bt_to_str(bytes([0x0A, 0x1B, 0x2C, 0x3D, 0x4E, 0x5F]), True))
# 0A:1B:2C:3D:4E:5F
```

A dispenser in swap mode, where readers see the last committed copy while a
writer fills the other one:

```python
from a113.dispenser import Dispenser, DispenserMode

readings = Dispenser(list, DispenserMode.SWAP)
with readings.control() as ctl:
    ctl.get().append(42)
with readings.watch() as w:
    print(w.get())
# [42]
```

A hyper net with two ports and one route:

```python
from a113.hyper_net import Executor, Port, Route, Token, InPlan, OutPlan

net = Executor("demo")
net.push_port(Port("in"))
net.push_port(Port("out"))
net.push_route(Route("r"))
net.bind_prp("in", "r", "out", InPlan(), OutPlan())
net.inject("in", Token("t"))
net.clock(0.0)  # the first tick moves nothing
net.clock(0.0)  # the token flies from "in" to "out"
print(net.make_graphviz())
```

## What it does not do

This is a library only: it installs no command. It has no graphics,
windowing or rendering, and no message protocol on top of its sockets and
serial lines. `ComPorts` does not watch for devices being plugged in or
removed; the list changes only when `refresh()` is called.

## Tests

```
pip install ".[test]"
pytest
```