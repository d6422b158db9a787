"""
Indexer App - Windowed URL Indexing Worker

Responsibilities:
- Tick every few minutes and start a run only inside the daily window
- Submit pending URLs (urls.txt) to the Google Indexing API, one at a time
- Move confirmed URLs to indexed.txt; stop on quota exhaustion or any other error
- Recycle indexed.txt into urls.txt once the pending queue is exhausted

Input/Output:
- urls.txt: pending queue, one URL per line
- indexed.txt: URLs confirmed in the current cycle
- Logs/log.txt: daily-rolled log file
"""
