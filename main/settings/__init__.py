import sys
from .base import *

RUNNING_PYTEST = 'pytest' in sys.modules or any('pytest' in arg for arg in sys.argv)

if (os.getenv('CI') == 'true' or os.getenv('GITHUB_ACTIONS') == 'true') and os.getenv('DB_HOST'):
    from .ci import *
elif RUNNING_PYTEST:
    from .test import *
elif os.environ.get('env') == 'prod':
    from .prod import *
else:
    from .dev_sample import *
