app_name = "translation_sheet_sync"
app_title = "Translation Sheet Sync"
app_publisher = "Translation Sheet Sync Contributors"
app_description = "Keep PHP translation catalogs in sync with Google Sheets"
app_email = "dev@example.com"

app_license = "mit"

# Push/pull run on demand only (whitelisted API or bench):
#   bench execute translation_sheet_sync.api.sync.push
#   bench execute translation_sheet_sync.api.sync.pull
