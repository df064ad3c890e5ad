from .user_model import User
from .donor_model import Donor
from .inventory_model import BloodInventory
from .request_model import BloodRequest
from .notification_model import Notification
from .file_model import FileBlob
