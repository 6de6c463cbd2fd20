# zaplog

Building blocks for structured logging: strongly typed log fields, array and
error fields, and a thread-safe registry of named encoder constructors.

## Installation

```
pip install zaplog
```

## Fields

A `Field` (in `zaplog.field`) is a frozen dataclass holding a `key`, a
`FieldType` and the value in one of three slots: `integer`, `string` or
`interface`. Build fields with the constructors in `zaplog.field`:

```python
from zaplog import field

fields = [
    field.string("url", "http://localhost/"),
    field.int_("attempt", 3),
    field.bool_("retry", True),
    field.float64("ratio", 0.5),
]
```

Integer constructors (`int8` … `int64`, `uint8` … `uint64`, `uintptr`) check
that the value fits the width and raise `OverflowError` when it does not.
Floats are stored as their IEEE 754 bit pattern; `float32` and `complex64`
round to single precision. `time_` takes a `datetime` (naive ones are read as
UTC) and `duration` takes a `timedelta` or integer nanoseconds.

Each value constructor has a `_p` form (for example `field.int_p`) that
accepts `None` and then returns `nil_field(key)`, a field that stands for an
explicit nil value. Other constructors: `skip`, `binary`, `byte_string`,
`reflect`, `namespace`, `stringer`, `object_` and `inline`. `object_` and
`inline` take any object with a `marshal_log_object(enc)` method and raise
`TypeError` otherwise.

When a value's type is not known in advance, `zaplog.anyvalue.any_` picks the
most specific field for it: `None` gives a nil field, bytes become binary,
homogeneous lists and tuples become typed array fields, exceptions become
error fields, objects with their own `__str__` become stringer fields, and
anything else falls back to `reflect`.

```python
from zaplog.anyvalue import any_

f = any_("count", 42)
```

## Arrays

`zaplog.array` builds fields that carry sequences. `array(key, val)` accepts
any object with a `marshal_log_array(arr)` method; the typed constructors
(`bools`, `ints`, `int8s` … `int64s`, `uints`, `uint8s` … `uint64s`,
`uintptrs`, `float32s`, `float64s`, `complex64s`, `complex128s`, `strings`,
`byte_strings`, `times`, `durations`) check and convert their elements up
front. `None` is accepted as an empty sequence.

```python
from zaplog import array

tags = array.strings("tags", ["a", "b"])
sizes = array.ints("sizes", [1, 2, 3])
users = array.objects("users", user_list)   # items with marshal_log_object
names = array.stringers("names", things)    # items logged through str()
```

When encoded, `objects` stops at the first object whose marshaling raises.

## Errors

```python
from zaplog.error import error, named_error, errors

f = error(exc)                     # stored under "error"
g = named_error("cause", exc)      # stored under "cause"
h = errors("failures", [e1, e2])   # None entries are skipped
```

Passing `None` to `error` or `named_error` returns a skipped field; passing
anything that is not an exception raises `TypeError`. Each element of an
`errors` field is encoded as an object with an `"error"` entry, plus an
`"errorVerbose"` entry holding the formatted traceback when the exception
was actually raised.

## Encoders

`zaplog.encoder` keeps a registry mapping names to constructors that take an
encoder configuration. The shared registry starts empty; add constructors
with `register_encoder` and build with `new_encoder`, or keep a private
`EncoderRegistry` with its `register`, `new` and `names` methods.

```python
from zaplog.encoder import register_encoder, new_encoder

register_encoder("mine", lambda cfg: MyEncoder(cfg))
enc = new_encoder("mine", encoder_config)
```

An empty name raises `NoEncoderNameError`. Registering a name twice, asking
for a name that is not registered, or passing a configuration whose
`time_key` is set while its `encode_time` is `None` raises `EncoderError`
(a `ValueError`).

## What this package does not do

`zaplog` provides fields and a place to register encoders, not a logger. It
ships no encoders of its own (no JSON or console output), no output sinks,
no byte buffers, no log levels and no logger objects; callers supply the
encoders that consume the fields.