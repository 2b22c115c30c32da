# Import models here so Alembic can discover metadata.
from backoffice.models.agent import Agent  # noqa: F401
from backoffice.models.sale import Sale  # noqa: F401
from backoffice.models.payment import Payment  # noqa: F401
from backoffice.models.balance import Balance  # noqa: F401
