# Models package - database tables
from relateai.models.user import User
from relateai.models.account import Account
from relateai.models.contact import Contact
from relateai.models.message import Message
from relateai.models.meddppicc import MeddppiccAssessment
from relateai.models.email_template import EmailTemplate
from relateai.models.linkedin import LinkedInIntegration, LinkedInConnection, LinkedInMessage
