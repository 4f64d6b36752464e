"""CrashIQ: accident severity classification and claim-handling directives."""
