# Import all models so SQLAlchemy can resolve relationships
from app.models.database import Base  # noqa: F401
from app.models.user import User  # noqa: F401
from app.models.prediction import Prediction  # noqa: F401
from app.models.optimization import Optimization  # noqa: F401
