PULL_FILES = "/repos/{repo}/pulls/{number}/files"

REVIEW_COMMENTS = "/repos/{repo}/pulls/{number}/comments"
REVIEW_COMMENT = "/repos/{repo}/pulls/comments/{comment_id}"

ISSUE_COMMENTS = "/repos/{repo}/issues/{number}/comments"
ISSUE_COMMENT = "/repos/{repo}/issues/comments/{comment_id}"
