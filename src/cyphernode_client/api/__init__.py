"""Gateway endpoint declarations and their request/response types."""

from cyphernode_client.api.core import (
    AddressType,
    AddressValidation,
    Balance,
    EstimateFeeRequest,
    FeeEstimate,
    Hello,
    MempoolInfo,
    NewAddress,
    NewAddressRequest,
)
from cyphernode_client.api.batcher import (
    AddToBatchRequest,
    BatchDetail,
    BatcherSummary,
    BatchOutput,
    BatchOutputInfo,
    BatchSpendRequest,
    BatchSpendResponse,
    BatchTxDetails,
    CreateBatcherRequest,
    CreateBatcherResponse,
    GetBatchDetailsRequest,
    GetBatcherRequest,
    RemoveFromBatchRequest,
    UpdateBatcherRequest,
    UpdateBatcherResponse,
)
from cyphernode_client.api.watcher import (
    ActiveWatches,
    ActiveXpubWatches,
    UnwatchedAddress,
    UnwatchedXpub,
    Watch,
    WatchAddressRequest,
    WatchedAddress,
    WatchedXpub,
    WatchXpubRequest,
    XpubWatch,
)
from cyphernode_client.api.lightning import (
    Binding,
    ConnectFundRequest,
    LnBolt11,
    LnChannel,
    LnConnectFund,
    LnConnectionString,
    LnFundAddress,
    LnFunds,
    LnInfo,
    LnOutput,
    LnPay,
    LnPays,
    LnRoute,
    LnWithdrawal,
    RouteHop,
    WithdrawFeerate,
    WithdrawRequest,
)

__all__ = [
    # Core
    "AddressType",
    "AddressValidation",
    "Balance",
    "EstimateFeeRequest",
    "FeeEstimate",
    "Hello",
    "MempoolInfo",
    "NewAddress",
    "NewAddressRequest",
    # Batcher
    "AddToBatchRequest",
    "BatchDetail",
    "BatcherSummary",
    "BatchOutput",
    "BatchOutputInfo",
    "BatchSpendRequest",
    "BatchSpendResponse",
    "BatchTxDetails",
    "CreateBatcherRequest",
    "CreateBatcherResponse",
    "GetBatchDetailsRequest",
    "GetBatcherRequest",
    "RemoveFromBatchRequest",
    "UpdateBatcherRequest",
    "UpdateBatcherResponse",
    # Watcher
    "ActiveWatches",
    "ActiveXpubWatches",
    "UnwatchedAddress",
    "UnwatchedXpub",
    "Watch",
    "WatchAddressRequest",
    "WatchedAddress",
    "WatchedXpub",
    "WatchXpubRequest",
    "XpubWatch",
    # Lightning
    "Binding",
    "ConnectFundRequest",
    "LnBolt11",
    "LnChannel",
    "LnConnectFund",
    "LnConnectionString",
    "LnFundAddress",
    "LnFunds",
    "LnInfo",
    "LnOutput",
    "LnPay",
    "LnPays",
    "LnRoute",
    "LnWithdrawal",
    "RouteHop",
    "WithdrawFeerate",
    "WithdrawRequest",
]
