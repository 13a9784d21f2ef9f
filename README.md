# resilience

Building blocks for application-level checkpointing, as a Python library.

## Modules

- `resilience.registration` – named pieces of state that a checkpoint saves and
  restores. `sanitized_label` turns a label into letters, digits and `_`;
  `label_hash` gives a stable integer id below 2**31 - 1. `CustomRegistration`
  takes your own serializer and deserializer, `SimpleRegistration` saves any
  buffer (for example a `bytearray` or numpy array) byte for byte, and
  `make_registration` picks the right kind, unpacking a `RegistrationInfo`.
  Registrations compare equal and hash alike when their names match.
- `resilience.registration_views` – `ViewRegistration`, registering a
  `ViewHolder` under its own label.
- `resilience.viewholder` – `ViewHolder` / `make_view_holder` wrap a numpy array
  and report its size, span, element size and contiguity. Contents can be
  copied to and from byte buffers and written to or read from binary streams.
  A read-only array gives a const holder that can only be read.
- `resilience.view_hooks` – `DynamicViewHooks` with four `CallbackOverloadSet`s
  (copy/move construction and assignment). Each set holds a callback for
  writable arrays and one for read-only arrays. Hooks do not re-enter on the
  same thread. A shared instance is available as `hooks`.
- `resilience.trace` – nested `Trace`, `TimingTrace` and `IterTimingTrace`
  records on a `TraceStack`, started with `begin_trace` and ended through a
  `TraceHandle` (also a context manager). `TraceStack.write` prints indented
  JSON.
- `resilience.jsonvalue` – rendering of plain Python JSON values (`serialize`,
  `serialize_string`, `to_str`, `evaluate_as_boolean`, `check_value`). Object
  keys are sorted, `/` is escaped and pretty output indents by two spaces.
- `resilience.jsonparse` – `parse`, `parse_prefix` and `check_syntax`. Parsing
  stops after the first value. Numbers come back as `float`. Errors raise
  `JsonSyntaxError` naming the line.
- `resilience.timer` – `Timer`, a monotonic stopwatch in seconds.
- `resilience.filesystem` – `remove_all`, `create_directory`, `file_exists`.
- `resilience.directory` – `ensure_directory_exists` builds a nested path one
  level per component, creating each level if asked.
  `set_checkpoint_directory` also hands the path to an object's
  `set_default_path`.
- `resilience.external_io` – `resolve_path` and `IOAccessor`, which stores data
  as a plain file. It also provides `transfer_from_host`, `transfer_to_host`
  and `create_empty_file`. `IOConfigurationManager` loads named settings from a
  JSON file. The shared manager from `get_configuration_manager` reads the file
  named by the `KR_IO_CONFIG` environment variable.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

Register a custom member and write it to a stream:

```python
import io
from resilience.registration import CustomRegistration

state = {"step": 0}

def save(stream):
    stream.write(state["step"].to_bytes(4, "little"))
    return True

def load(stream):
    state["step"] = int.from_bytes(stream.read(4), "little")
    return True

reg = CustomRegistration(save, load, "time step")
print(reg.name)          # time_step
buf = io.BytesIO()
reg.serialize(buf)
```

Hold an array and round-trip it through bytes:

```python
import io
import numpy as np
from resilience.viewholder import make_view_holder

data = np.arange(8, dtype=np.float64)
holder = make_view_holder(data, "field", True)
stream = io.BytesIO()
holder.serialize(stream)
data[:] = 0
stream.seek(0)
holder.deserialize(stream)   # data is 0..7 again
```

Trace a region of work and dump the result:

```python
import sys
from resilience.trace import TraceStack, TimingTrace, begin_trace

stack = TraceStack()
with begin_trace(stack, TimingTrace, "checkpoint", enabled=True):
    pass
stack.write(sys.stdout)
```

Parse and serialize JSON:

```python
from resilience.jsonparse import parse
from resilience.jsonvalue import serialize

value = parse('{"a": [1, 2.5, "x"]}')
print(serialize(value, True))
```

Create a nested checkpoint directory:

```python
import tempfile
from resilience.directory import ensure_directory_exists

root = tempfile.mkdtemp()
path = ensure_directory_exists(True, root, "run", 3)
# path is root + "/run//3/"; each component adds "/<component>/"
```

## What this package does not do

There is no command-line tool and no checkpoint driver. Nothing here decides
when to checkpoint or talks to a checkpoint storage service. The registrations
and holders only supply the data to save and restore. Arrays are ordinary numpy
arrays in host memory; the `host_space` flag only chooses how contents are
packed. `IOAccessor` writes plain files; other storage formats need a
subclass.