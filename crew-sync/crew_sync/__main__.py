from crew_sync.main import main

main()
