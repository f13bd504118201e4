"""Fixed instructions for the two completion passes."""

TYPE_INLINE = "Type 1"
TYPE_FOLLOW_LINK = "Type 2"
TYPE_FOLLOW_CONTENT = "Type 3"


# === First pass: classify the search result page ===
CLASSIFY_SYSTEM_PROMPT = """
You are a specialized assistant focused on extracting property links and transaction data.
For Type 2 responses, carefully look for markdown links containing 'parcel.aspx' and matching
house numbers. Pay special attention to the exact format: [ADDRESS](URL) where URL contains
'parcel.aspx'. Respond with JSON only, without any commentary.
"""


def build_classify_prompt(search_address: str, url: str, raw_content, content: str) -> str:
    return f"""
        Extract property sale transactions from the following real estate data.
        Return ONLY the transactions found in the Ownership History table.

        There are 3 types of conditions we are looking for:

        {TYPE_INLINE}: Look specifically for the "Ownership History" table in the raw_content field.
        The table may contain columns like: Owner, Sale Price, Sale Date, etc.
        If the table is found, add a transaction for each row and return:
        [
          {{"type": "{TYPE_INLINE}"}},
          {{
            "saleDate": "YYYY-MM-DD",
            "salePrice": "$X,XXX,XXX",
            "buyer": "Current Owner Name",
            "seller": "Previous Owner Name"
          }}
        ]

        {TYPE_FOLLOW_LINK}: Look for markdown links that contain both "parcel.aspx" and a house number
        with street name, for example:
        [8 LYNNBROOK ROAD](https://gis.vgsi.com/fairfieldct/Parcel.aspx?pid=2271)
        If the link for the search address is found, return:
        [
          {{"type": "{TYPE_FOLLOW_LINK}"}},
          {{"address": "8 LYNNBROOK ROAD", "link": "https://gis.vgsi.com/fairfieldct/Parcel.aspx?pid=2271"}}
        ]

        {TYPE_FOLLOW_CONTENT}: If raw_content is null, check whether the search address "{search_address}"
        appears in the content field. If it does, return:
        [
          {{"type": "{TYPE_FOLLOW_CONTENT}"}},
          {{"address": "The address found in the content", "link": "{url}"}}
        ]

        Return an empty array [] only if none of the conditions are found.

        Search address: {search_address}
        Raw content to analyze: {raw_content if raw_content else "null"}
        Content to analyze if raw_content is null: {content}
        """


# === Second pass: parse the Ownership History table ===
TRANSACTIONS_SYSTEM_PROMPT = """
You are a specialized assistant focused on extracting property transaction data from Ownership
History tables. Your primary task is to find and parse the ownership history table data, which
typically includes sale dates, prices, and owner names. Pay special attention to tables labeled
as 'Ownership History' or similar variations. Respond with JSON only, without any commentary.
"""


def build_transactions_prompt(content: str) -> str:
    return f"""
        Find and extract property sale transactions from the Ownership History table in the
        following data. The table should contain columns for Owner/Buyer, Sale Price, and Sale Date.

        Format each transaction as follows:
        - saleDate should be in YYYY-MM-DD format
        - salePrice should include the dollar sign and commas
        - buyer should be the name in the Owner column
        - seller should be derived from the previous owner in the chronological sequence

        Return ONLY an array of transactions in this format, or [] if there are none:
        [
          {{
            "saleDate": "YYYY-MM-DD",
            "salePrice": "$X,XXX,XXX",
            "buyer": "Current Owner Name",
            "seller": "Previous Owner Name"
          }}
        ]

        Raw content to analyze: {content}
        """
