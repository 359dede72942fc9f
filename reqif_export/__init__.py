"""ReqIF Export — converts ECSS-E-TM-10-25 requirements into ReqIF documents."""
