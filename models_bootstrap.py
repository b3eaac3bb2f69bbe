# models_bootstrap.py
from tenant import models as _tenant_models
from user import models as _user_models
from location import models as _location_models
from item import models as _item_models
