import sys

from student_hub.main import main

sys.exit(main())
