# loggingdrain

`loggingdrain` groups raw log lines into templates as they arrive. It uses the
Drain algorithm: each line is split into whitespace-separated tokens, routed
through a fixed-depth prefix tree keyed by token count and leading tokens, and
compared with the clusters found there. A line that is similar enough to an
existing cluster merges into it, and the tokens that differ become the
wildcard `[*]`. Otherwise it starts a new cluster.

```
Dec 10 07:07:38 LabSZ sshd[24206]: input_userauth_request: invalid user test9 [preauth]
Dec 10 07:08:28 LabSZ sshd[24208]: input_userauth_request: invalid user webmaster [preauth]
```

become the template

```
Dec 10 [*] LabSZ [*] input_userauth_request: invalid user [*] [preauth]
```

## Features

- Online clustering with configurable tree depth, similarity threshold,
  children per node and a cap on the number of clusters. Clusters are kept in
  a least-recently-used cache (`ClusterCache`), so the least recently used
  ones are dropped first when the cap is reached.
- Regular-expression masking before clustering, for example to turn numbers or
  IP addresses into `[:NUM:]` or `[:IP:]`.
- Matching of new lines against known templates without changing them.
- JSON serialisation of the full miner state, and saving and loading it in
  Redis.

## Installation

From a checkout of the project:

```
pip install .
```

## Command line

```
loggingdrain
```

prints `input q to quit`, then reads log lines from standard input and, for
each one, prints the template the line falls into. Enter `q` on a line of its
own to stop: the command prints `quit`, the number of clusters and every
template it has learned. If input ends without a `q` line, it exits without
printing the summary.

## Library use

```python
from loggingdrain.miner import MinerConfig, TemplateMiner

miner = TemplateMiner(MinerConfig())

with open("app.log", encoding="utf-8") as log:
    for line in log:
        miner.add_log_message(line)

print(miner.status())

cluster = miner.match("Dec 10 09:13:01 LabSZ sshd[24510]: input_userauth_request: invalid user admin [preauth]")
if cluster is not None:
    print(cluster.template())
```

`MinerConfig` holds a `DrainConfig` (`similarity`, default 0.4; `depth`,
default 4; `max_children`, default 100; `max_clusters`, default 1000) and a
`MaskConfig` (`prefix`, default `[:`; `suffix`, default `:]`; `instructions`,
a list of `(pattern, mask_with)` pairs).

`add_log_message` returns a `LogMessageResponse` with the cluster the line
joined, its id as a string, the mined template, the current cluster count and
whether the cluster was created, updated or left unchanged
(`ClusterUpdateType.NEW_CLUSTER`, `UPDATE_CLUSTER` or `NONE`). `match` never
creates or changes clusters and returns `None` when nothing matches exactly.

### Masking

A `LogMasker` replaces every match of a pattern with the mask name wrapped in a
prefix and a suffix:

```python
from loggingdrain.masking import LogMasker

masker = LogMasker("<!", "!>")
masker.add_instruction("NUM", r"\b\d+\b")
masker.mask("D9 test 999, 888 1A ccc 3")
# 'D9 test <!NUM!>, <!NUM!> 1A ccc <!NUM!>'
```

Instructions are keyed by mask name; adding one with an existing name replaces
it. An invalid pattern raises `MaskPatternError`.

### Lower-level clustering

`loggingdrain.drain.Drain` is the clustering engine on its own, configured with
a `DrainConfig`. `Drain.match` takes a `SearchStrategy`: `NEVER` only searches
the tree, `FALLBACK` searches every cluster with the same token count when the
tree search finds nothing, and `ALWAYS` searches those clusters directly.

### Saving state

```python
miner_json = miner.to_json()
restored = TemplateMiner.from_json(miner_json)

# Replace the clusters of an existing miner while keeping its configuration:
miner.load_miner_data(miner_json)
```

`to_dict` and `from_dict` give the same state as plain dictionaries.

With Redis:

```python
from loggingdrain.persistence import RedisPersistence

password = "password"
store = RedisPersistence("localhost:6379", password, 0, "my-service")
store.save(miner)
restored = store.load()
```

The miner is stored as JSON under the service key. `load` raises
`InternalError` when the key is missing, the data cannot be read or Redis
reports an error. `RedisPersistence.subscribe` returns a Redis pub/sub handle
subscribed to a channel named after the service key; the package itself
publishes nothing on it. An existing Redis client can be passed as `client`.

### Errors

The package's own exceptions derive from `LoggingDrainError` in
`loggingdrain.errors`: `MaskPatternError` for patterns that do not compile and
`InternalError` for inconsistent data and storage failures. Malformed JSON
given to `TemplateMiner.from_json` raises the standard `json.JSONDecodeError`.

## What it does not do

The package runs no server and keeps no state on disk by itself: state lives
in memory, and is stored only where you put the JSON, or in a Redis server you
run and point `RedisPersistence` at.

## Running the tests

From a checkout of the project:

```
pip install ".[test]"
pytest
```