# infernograd

A compact reverse-mode automatic differentiation engine, together with
plain-Python gradient kernels and a few runtime utilities.

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## Modules

- `infernograd.engine`: the autograd core.
  - `Node` is the abstract base class for graph operations. A subclass
    implements `parents()` (the nodes that produced its inputs, `None` for
    untracked ones), `backward()` and `release()`.
  - `Engine.backward(root, seed=1.0)` orders the reachable graph
    topologically (`Engine.build_topo(root)`), seeds `root` with `seed`,
    calls every node's `backward()` from the output towards the leaves, then
    calls `release()` on each node. It raises `ValueError` if `root` is
    `None`.
  - Inside a pass, a node reads its incoming gradient with
    `Engine.grad_in(node, slot=0)` (or `None` if nothing arrived) and sends
    gradients upstream with `Engine.accumulate(node, slot, grad)`; gradients
    reaching the same `(node, slot)` are summed with `+`. The gradient store
    is per thread.
  - `AccumulateGrad(leaf)` is the leaf node: its `backward()` sets
    `leaf.grad` to the gradient that reached it. The leaf is held by weak
    reference where possible.
  - `Edge` is the hashable `(node, slot)` key used by the gradient store.
  - `no_grad()` returns a context manager that switches gradient tracking
    off for a block; `is_grad_enabled()` reports the current state.
- `infernograd.kernels`: backward kernels over flat sequences addressed by
  shape, strides and offset: `gelu_grad_tanh_approx`, `gelu_backward`,
  `gelu_backward_strided`, `sigmoid_backward`, `mse_loss_backward`,
  `normalize_softmax_axis`, `softmax_groups_excluding_axis`,
  `softmax_backward` and `select_backward_strided`. Kernels that take an
  `out` sequence write into it and return it; rank mismatches and invalid
  axes raise `ValueError`.
- `infernograd.logger`: `LogLevel` (`ERROR`, `WARNING`, `INFO`, `DEBUG`)
  and `Logger`, which writes timestamped lines to standard output and, after
  `Logger.start(filename)`, also to a file named
  `<filename>-<YYYY-mm-dd.HHMMSS>.txt` (the path is returned).
  `Logger.set_log_level(level)` sets the most verbose level written (the
  default is `DEBUG`); `Logger.stop()` closes the file.
- `infernograd.timer`: `Timer`, a stopwatch with `start()`, `stop()`,
  `elapsed_ms()` and `elapsed_sec()`; it also works as a context manager.
- `infernograd.idbroker`: `IDBroker.gen_id()` returns increasing integers
  from zero; `IDBroker.reset(start=0)` restarts the count.
- `infernograd.nodetracker`: `NodeTracker`, a process-wide registry of ids
  and names (`add_id`, `remove_id`, `update_name`, `get_name`, `has_id`,
  `dump_ids`, `clear`).

## Example

```python
from infernograd.engine import AccumulateGrad, Engine, Node


class Param:
    grad = None


class Scale(Node):
    def __init__(self, factor, parent):
        self.factor = factor
        self.parent = parent

    def parents(self):
        return (self.parent,)

    def backward(self):
        g = Engine.grad_in(self, 0)
        Engine.accumulate(self.parent, 0, g * self.factor)

    def release(self):
        self.parent = None


w = Param()
out = Scale(3.0, AccumulateGrad(w))
Engine.backward(out, 1.0)
print(w.grad)  # 3.0
```

```python
from infernograd.kernels import sigmoid_backward
from infernograd.timer import Timer

with Timer("sigmoid") as timer:
    grad = sigmoid_backward([0.5, 0.25], [1.0, 1.0])
print(grad, timer.elapsed_ms())
```

## What this package does not do

There is no tensor type and no forward operations: the engine routes
whatever gradient values the nodes hand it (numbers, or any objects that
support `+`), and the kernels work on plain Python sequences. There are no
ready-made graph nodes for addition, matrix multiplication and the like
beyond `AccumulateGrad`, no GPU execution, no random number generator, and
no command-line program.