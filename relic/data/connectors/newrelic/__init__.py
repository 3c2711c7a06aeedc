"""New Relic connector.

Direct access to the New Relic REST API v2 metric data and applications
endpoints. Use ``MetricDataAPI`` for chunked, cached queries.
"""

from .config import MOCK_METRIC_DATA_URL, applications_url, metric_data_url
from .rest import NewRelicRESTConnector

__all__ = [
    "NewRelicRESTConnector",
    "MOCK_METRIC_DATA_URL",
    "applications_url",
    "metric_data_url",
]
