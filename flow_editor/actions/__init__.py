"""
Action Forms.

One form per action kind; update contact covers all contact property kinds.
"""

from .add_labels import AddLabelsForm
from .send_broadcast import SendBroadcastForm
from .send_email import SendEmailForm
from .send_msg import SendMsgForm
from .set_run_result import SetRunResultForm
from .update_contact import UpdateContactForm

__all__ = [
    "AddLabelsForm",
    "SendBroadcastForm",
    "SendEmailForm",
    "SendMsgForm",
    "SetRunResultForm",
    "UpdateContactForm",
]
