from .requests import BatchCreate, BatchUpdate, JoinBatchRequest, AddStudentsRequest, normalize_batch_code
from .responses import BatchResponse, BatchSummary, StudentBatches
