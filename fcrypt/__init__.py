VERSION_NUMBER = "1.1.0"
