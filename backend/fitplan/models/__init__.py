# Import all models here
from fitplan.models.user import User
