import os
import warnings

# Ignore deprecation noise from the Azure SDK
warnings.filterwarnings("ignore", category=DeprecationWarning, module="azure.*")

# Set test environment variables
os.environ.update({})

# Import fixtures so they are available to all tests
from tests.fixtures.media_fixtures import *  # noqa: E402, F403
from tests.fixtures.mongo_fixtures import *  # noqa: E402, F403
