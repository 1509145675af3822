"""Batcher endpoints.

A batcher is a named template (label + default confTarget) under which
outputs are queued with ``addtobatch`` and later paid in a single sendmany
with ``batchspend``. Batcher id 1 is the default batcher created at install
time; calls that take neither an id nor a label act on it.

All batcher endpoints answer with a ``{result, error}`` envelope except
``batchspend``, which answers with a bare ``{status, hash}`` object.
"""

from dataclasses import dataclass
from typing import Optional, Union

from cyphernode_client.endpoint import Endpoint
from cyphernode_client.envelope import Shape
from cyphernode_client.errors import InputError
from cyphernode_client.wire import wire


def _check_conf_target(conf_target: Optional[int]):
    if conf_target is not None and conf_target < 1:
        raise InputError("confTarget must be at least 1")


@dataclass
class CreateBatcherRequest:
    """Create a batching template."""
    batcher_label: str = wire("batcherLabel")
    conf_target: int = wire("confTarget")

    def __post_init__(self):
        if not self.batcher_label:
            raise InputError("batcherLabel is required")
        _check_conf_target(self.conf_target)


@dataclass
class CreateBatcherResponse:
    """Id of the created batcher."""
    batcher_id: int = wire("batcherId")


@dataclass
class UpdateBatcherRequest:
    """Change a batching template's default confTarget."""
    conf_target: int = wire("confTarget")
    batcher_id: Optional[int] = wire("batcherId", default=None)
    batcher_label: Optional[str] = wire("batcherLabel", default=None)

    def __post_init__(self):
        _check_conf_target(self.conf_target)


@dataclass
class UpdateBatcherResponse:
    """Updated batching template."""
    batcher_id: int = wire("batcherId")
    batcher_label: str = wire("batcherLabel")
    conf_target: int = wire("confTarget")


@dataclass
class AddToBatchRequest:
    """Queue an output for the next batch."""
    address: str
    amount: float  # BTC
    batcher_id: Optional[int] = wire("batcherId", default=None)
    batcher_label: Optional[str] = wire("batcherLabel", default=None)
    output_label: Optional[str] = wire("outputLabel", default=None)
    webhook_url: Optional[str] = wire("webhookUrl", default=None)

    def __post_init__(self):
        if not self.address:
            raise InputError("address is required")
        if self.amount <= 0:
            raise InputError("amount must be positive")


@dataclass
class RemoveFromBatchRequest:
    """Remove a queued output."""
    output_id: int = wire("outputId")


@dataclass
class BatchOutputInfo:
    """Batch state after adding or removing an output.

    ``oldest`` and ``total`` are always present but null for an empty batch.
    """
    batcher_id: int = wire("batcherId")
    output_id: int = wire("outputId")
    nb_outputs: int = wire("nbOutputs")
    oldest: Union[int, str, None]
    total: Optional[float]  # BTC


@dataclass
class GetBatcherRequest:
    """Select a batcher by id or label."""
    batcher_id: Optional[int] = wire("batcherId", default=None)
    batcher_label: Optional[str] = wire("batcherLabel", default=None)


@dataclass
class BatcherSummary:
    """Current summary of a batching template."""
    batcher_id: int = wire("batcherId")
    batcher_label: str = wire("batcherLabel")
    conf_target: int = wire("confTarget")
    nb_outputs: int = wire("nbOutputs")
    oldest: Union[int, str, None]
    total: Optional[float]  # BTC


@dataclass
class GetBatchDetailsRequest:
    """Select a batch: a batcher plus an optional txid.

    Without a txid the current, not yet executed batch is returned.
    """
    batcher_id: Optional[int] = wire("batcherId", default=None)
    batcher_label: Optional[str] = wire("batcherLabel", default=None)
    txid: Optional[str] = None


@dataclass
class BatchTxDetails:
    """Mempool/chain details of an executed batch transaction."""
    firstseen: int
    size: int
    vsize: int
    replaceable: bool
    fee: float  # BTC


@dataclass
class BatchOutput:
    """One output of a batch."""
    output_id: int = wire("outputId")
    address: str = wire("address")
    amount: float = wire("amount")  # BTC
    output_label: Optional[str] = wire("outputLabel", default=None)
    added_timestamp: Optional[str] = wire("addedTimestamp", default=None)


@dataclass
class BatchDetail:
    """Full state of a batch, including its outputs.

    ``txid``, ``hash`` and ``details`` only exist once the batch was spent.
    """
    batcher_id: int = wire("batcherId")
    batcher_label: str = wire("batcherLabel")
    conf_target: int = wire("confTarget")
    nb_outputs: int = wire("nbOutputs")
    oldest: Union[int, str, None]
    total: Optional[float]  # BTC
    outputs: list[BatchOutput]
    txid: Optional[str] = None
    hash: Optional[str] = None
    details: Optional[BatchTxDetails] = None


@dataclass
class BatchSpendRequest:
    """Execute a batch. Defaults apply to omitted members."""
    batcher_id: Optional[int] = wire("batcherId", default=None)
    batcher_label: Optional[str] = wire("batcherLabel", default=None)
    conf_target: Optional[int] = wire("confTarget", default=None)

    def __post_init__(self):
        _check_conf_target(self.conf_target)


@dataclass
class BatchSpendResponse:
    """Broadcast status of the batch transaction."""
    status: str
    hash: str


CREATE_BATCHER = Endpoint("POST", "createbatcher", CreateBatcherResponse)
UPDATE_BATCHER = Endpoint("POST", "updatebatcher", UpdateBatcherResponse)
ADD_TO_BATCH = Endpoint("POST", "addtobatch", BatchOutputInfo)
REMOVE_FROM_BATCH = Endpoint("POST", "removefrombatch", BatchOutputInfo)
GET_BATCHER = Endpoint("POST", "getbatcher", BatcherSummary)
GET_BATCH_DETAILS = Endpoint("POST", "getbatchdetails", BatchDetail)
LIST_BATCHERS = Endpoint("GET", "listbatchers", list[BatcherSummary])
BATCH_SPEND = Endpoint("POST", "batchspend", BatchSpendResponse, Shape.BARE)
